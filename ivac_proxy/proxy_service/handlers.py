from starlette.requests import Request
from starlette.responses import Response

from ivac_proxy.shared.config import Settings, get_settings
from ivac_proxy.shared.logging import get_logger
from ivac_proxy.shared.models import InboundRequest, ProxyResponse
from ivac_proxy.proxy_service.errors import ProxyError
from ivac_proxy.proxy_service.forwarder import ResilientForwarder
from ivac_proxy.proxy_service.request_transformer import BODYLESS_METHODS, RequestTransformer
from ivac_proxy.proxy_service.response_transformer import shape
from ivac_proxy.proxy_service.upstream.base_transport import UpstreamTransport

logger = get_logger(__name__)


class ProxyRequestHandler:
    """
    Encapsulates all logic related to handling HTTP requests that must be
    forwarded to the upstream origin.
    """

    def __init__(self, settings: Settings | None = None):
        self.__settings: Settings = settings or get_settings()
        self.__transformer = RequestTransformer(self.__settings)

    def _get_transport(self, request: Request) -> UpstreamTransport:
        """Get the upstream transport from the application state."""
        transport = getattr(request.app.state, "upstream_transport", None)
        if transport is None:
            raise RuntimeError("Upstream transport is not initialized")
        return transport

    async def handle(self, request: Request) -> Response:
        """Public entry point used by Starlette router."""
        inbound = self._build_inbound_request(request)
        logger.info(f"Request URL: {self.__transformer.target_url(inbound)}, Method: {inbound.method}")

        outbound = self.__transformer.transform(inbound)
        if isinstance(outbound, ProxyResponse):
            return self._build_http_response(outbound)

        try:
            forwarder = ResilientForwarder(
                self._get_transport(request),
                max_attempts=self.__settings.max_attempts,
                base_delay_ms=self.__settings.base_delay_ms,
            )
            upstream = await forwarder.forward(outbound)
            return self._build_http_response(shape(upstream, inbound))

        except ProxyError as exc:
            logger.error(f"Request to {outbound.url} failed: {exc}")
            return Response(content="Internal Server Error", status_code=500)

        except Exception as exc:
            logger.exception(f"Request to {outbound.url} failed due to unexpected error: {exc}")
            return Response(content="Internal Server Error", status_code=500)

    def _build_inbound_request(self, request: Request) -> InboundRequest:
        """
        Convert incoming Starlette request → InboundRequest.

        Path and query are taken from the raw scope so percent-escapes such
        as %23 and %3F reach the upstream unchanged.
        """
        body = None
        if request.method.upper() not in BODYLESS_METHODS:
            body = request.stream()

        raw_path = request.scope.get("raw_path") or request.scope["path"].encode("utf-8")

        return InboundRequest(
            method=request.method,
            path=raw_path.decode("latin-1"),
            query=request.scope["query_string"].decode("latin-1"),
            headers=request.headers.items(),
            body=body,
        )

    def _build_http_response(self, proxy_resp: ProxyResponse) -> Response:
        """
        Translate ProxyResponse → Starlette Response.

        Headers are appended one by one so repeated ones such as Set-Cookie
        survive. The status text is left to the server, ASGI carries no reason
        phrase.
        """
        response = Response(content=proxy_resp.body, status_code=proxy_resp.status_code)
        for key, value in proxy_resp.headers:
            response.headers.append(key, value)
        return response


async def proxy_request_handler(request: Request) -> Response:
    """Starlette endpoint forwarding every request to the upstream origin."""
    handler: ProxyRequestHandler = request.app.state.proxy_handler
    return await handler.handle(request)
