"""Abstract base classes for the upstream transport."""

from abc import ABC, abstractmethod

from ivac_proxy.shared.models import OutboundRequest, UpstreamResponse


class UpstreamTransport(ABC):
    """Abstract interface for sending one request attempt upstream."""

    @abstractmethod
    async def send(self, request: OutboundRequest) -> UpstreamResponse:
        """
        Send a request to the upstream origin and read the full response.

        Redirects must be returned as-is, never followed.

        Args:
            request: Request to forward

        Returns:
            Response from the upstream origin

        Raises:
            TransientNetworkError: For connection, DNS and timeout failures
        """
        pass
