"""Turns an inbound request into the descriptor sent upstream."""

from ivac_proxy.shared.config import Settings, get_settings
from ivac_proxy.shared.models import InboundRequest, OutboundRequest, ProxyResponse
from ivac_proxy.proxy_service.body import ReplayableBody

SPOOFED_HEADERS = ("host", "origin", "referer", "user-agent")
# aiohttp advertises only the encodings it can decode
CLIENT_NEGOTIATED_HEADERS = ("accept-encoding",)
BODYLESS_METHODS = ("GET", "HEAD")
FAVICON_PATH = "/favicon.ico"

PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Max-Age": "86400",
}


class RequestTransformer:
    """Builds upstream requests that look like they come from the origin's own pages."""

    def __init__(self, settings: Settings | None = None):
        settings = settings or get_settings()
        self._origin = settings.upstream_origin.rstrip("/")
        self._host = settings.upstream_host

    def target_url(self, request: InboundRequest) -> str:
        """Upstream URL for ``request``: origin + path + query."""
        url = f"{self._origin}{request.path}"
        if request.query:
            url += f"?{request.query}"
        return url

    def build_headers(self, request: InboundRequest) -> dict[str, str]:
        """Inbound headers minus the spoofed ones, plus the origin's own values."""
        headers = {
            key: value
            for key, value in request.headers
            if key.lower() not in SPOOFED_HEADERS + CLIENT_NEGOTIATED_HEADERS
        }
        headers.update(
            {
                "Host": self._host,
                "Referer": self._origin,
                "Origin": self._origin,
            }
        )
        return headers

    def transform(self, request: InboundRequest) -> OutboundRequest | ProxyResponse:
        """
        Convert ``request`` into an upstream descriptor.

        Favicon requests and CORS preflights are answered locally, so a
        ProxyResponse is returned for them instead of a descriptor.
        """
        if request.path == FAVICON_PATH:
            return ProxyResponse(status_code=204, status_text="No Content")

        method = request.method.upper()
        if method == "OPTIONS":
            return ProxyResponse(
                status_code=204,
                status_text="No Content",
                headers=list(PREFLIGHT_HEADERS.items()),
            )

        body = None
        if method not in BODYLESS_METHODS and request.body is not None:
            body = ReplayableBody(request.body)

        return OutboundRequest(
            method=method,
            url=self.target_url(request),
            headers=self.build_headers(request),
            body=body,
        )
