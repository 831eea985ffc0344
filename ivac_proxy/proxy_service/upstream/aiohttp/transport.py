"""aiohttp transport implementation for the upstream origin."""

import asyncio

import aiohttp
from aiohttp.http_exceptions import HttpProcessingError
from yarl import URL

from ivac_proxy.shared.logging import get_logger
from ivac_proxy.shared.models import OutboundRequest, UpstreamResponse
from ivac_proxy.proxy_service.errors import TransientNetworkError, UpstreamPayloadError
from ivac_proxy.proxy_service.upstream.base_transport import UpstreamTransport

logger = get_logger(__name__)


class AiohttpUpstreamTransport(UpstreamTransport):
    """aiohttp-based implementation of the upstream transport."""

    def __init__(self, session: aiohttp.ClientSession, timeout: float = 30.0):
        """
        Initialize aiohttp transport.

        Args:
            session: Open client session
            timeout: Per-attempt timeout in seconds
        """
        self._session = session
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def send(self, request: OutboundRequest) -> UpstreamResponse:
        """Send one attempt and read the whole response body.

        Args:
            request: Request to forward

        Returns:
            Response from the upstream origin

        Raises:
            TransientNetworkError: For connection, DNS and timeout failures
            UpstreamPayloadError: For bodies that cannot be read or decoded

        """
        logger.debug("Sending request upstream", extra={"url": request.url})

        try:
            async with self._session.request(
                request.method,
                URL(request.url, encoded=True),
                headers=request.headers,
                data=request.body,
                allow_redirects=False,
                timeout=self._timeout,
            ) as response:
                body = await response.read()
                headers = list(response.headers.items())
                status, reason = response.status, response.reason or ""
        except (aiohttp.ClientPayloadError, aiohttp.ClientResponseError, HttpProcessingError) as exc:
            # the upstream did answer; a retry would get the same bytes
            raise UpstreamPayloadError(str(exc) or exc.__class__.__name__) from exc
        except asyncio.TimeoutError as exc:
            raise TransientNetworkError(f"Upstream request timed out: {request.url}") from exc
        except aiohttp.ClientError as exc:
            raise TransientNetworkError(str(exc) or exc.__class__.__name__) from exc

        logger.debug("Received upstream response", extra={"status": status})

        return UpstreamResponse(status_code=status, reason=reason, headers=headers, body=body)
