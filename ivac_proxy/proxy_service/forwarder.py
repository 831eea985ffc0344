"""Upstream forwarding with retry and exponential backoff."""

import asyncio
from collections.abc import Awaitable, Callable
from enum import Enum

from ivac_proxy.shared.logging import get_logger
from ivac_proxy.shared.models import OutboundRequest, UpstreamResponse
from ivac_proxy.proxy_service.errors import RetriesExhaustedError, TransientNetworkError
from ivac_proxy.proxy_service.upstream.base_transport import UpstreamTransport

logger = get_logger(__name__)


class AttemptOutcome(str, Enum):
    """Result of a single upstream attempt."""

    SUCCESS = "success"
    REDIRECT = "redirect"
    PASSTHROUGH = "passthrough"
    TRANSIENT_FAILURE = "transient_failure"


def classify(status_code: int) -> AttemptOutcome:
    """Map an upstream status to its outcome. Only 302 counts as a redirect."""
    if 200 <= status_code < 300:
        return AttemptOutcome.SUCCESS
    if status_code == 302:
        return AttemptOutcome.REDIRECT
    return AttemptOutcome.PASSTHROUGH


def backoff_delay_ms(attempt: int, base_delay_ms: int) -> int:
    """Delay before the next try after ``attempt`` failures: base * 2^(attempt-1)."""
    return base_delay_ms * 2 ** (attempt - 1)


class ResilientForwarder:
    """Sends requests upstream, retrying transport failures only."""

    def __init__(
        self,
        transport: UpstreamTransport,
        max_attempts: int = 3,
        base_delay_ms: int = 1000,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._transport = transport
        self._max_attempts = max_attempts
        self._base_delay_ms = base_delay_ms
        self._sleep = sleep

    async def _attempt(
        self, request: OutboundRequest
    ) -> tuple[AttemptOutcome, UpstreamResponse | TransientNetworkError]:
        """Run one attempt and classify it."""
        try:
            response = await self._transport.send(request)
        except TransientNetworkError as exc:
            return AttemptOutcome.TRANSIENT_FAILURE, exc

        return classify(response.status_code), response

    async def forward(self, request: OutboundRequest) -> UpstreamResponse:
        """
        Send ``request`` until an HTTP response arrives or attempts run out.

        Any HTTP status ends the loop: 2xx and 302 as success, everything
        else is handed back unchanged for the caller to relay.

        Raises:
            RetriesExhaustedError: If every attempt failed at the transport level
        """
        attempt = 0
        while True:
            outcome, result = await self._attempt(request)

            if outcome is not AttemptOutcome.TRANSIENT_FAILURE:
                logger.debug(f"Upstream answered {result.status_code} ({outcome.value})")
                return result

            attempt += 1
            logger.warning(f"Attempt {attempt}/{self._max_attempts} to {request.url} failed: {result}")
            if attempt >= self._max_attempts:
                raise RetriesExhaustedError(attempt, result) from result

            delay_ms = backoff_delay_ms(attempt, self._base_delay_ms)
            logger.info(f"Retrying {request.url} in {delay_ms} ms")
            await self._sleep(delay_ms / 1000)
