"""Shapes upstream responses before they are relayed to the caller."""

import json

from ivac_proxy.shared.headers import get_header, with_headers, without_headers
from ivac_proxy.shared.models import InboundRequest, ProxyResponse, UpstreamResponse
from ivac_proxy.proxy_service.errors import UpstreamMalformedBodyError

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Credentials": "true",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Requested-With, X-CSRF-Token",
    "Access-Control-Max-Age": "86400",
}

# The body is decoded and re-encoded, so upstream framing no longer applies.
NON_RELAYED_HEADERS = (
    "connection",
    "keep-alive",
    "transfer-encoding",
    "content-encoding",
    "content-length",
)


def _reject_constant(token: str):
    raise ValueError(f"{token} is not valid JSON")


def is_root_get(request: InboundRequest) -> bool:
    return request.method.upper() == "GET" and request.path == "/"


def relayed_headers(upstream: UpstreamResponse) -> list[tuple[str, str]]:
    """Upstream headers with CORS headers applied on top."""
    return with_headers(without_headers(upstream.headers, NON_RELAYED_HEADERS), CORS_HEADERS)


def shape(upstream: UpstreamResponse, request: InboundRequest) -> ProxyResponse:
    """
    Build the response sent back to the caller.

    ``GET /`` is relayed as text with a forced 200. A 302 becomes a bodiless
    redirect to the upstream Location. Everything else is treated as JSON
    and re-serialized with the upstream status kept.

    Raises:
        UpstreamMalformedBodyError: If a JSON body was expected but did not parse
    """
    headers = relayed_headers(upstream)

    if is_root_get(request):
        return ProxyResponse(
            status_code=200,
            status_text="OK",
            headers=headers,
            body=upstream.body.decode("utf-8", errors="replace").encode("utf-8"),
        )

    if upstream.status_code == 302:
        location = get_header(upstream.headers, "Location")
        if location is not None:
            headers = with_headers(headers, {"Location": location})
        return ProxyResponse(status_code=302, status_text="Found", headers=headers)

    try:
        data = json.loads(upstream.body, parse_constant=_reject_constant)
    except ValueError as exc:
        raise UpstreamMalformedBodyError(
            f"Upstream returned {upstream.status_code} with a non-JSON body: {exc}"
        ) from exc

    return ProxyResponse(
        status_code=upstream.status_code,
        status_text=upstream.reason,
        headers=headers,
        body=json.dumps(data, separators=(",", ":"), ensure_ascii=False).encode("utf-8"),
    )
