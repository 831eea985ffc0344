import pytest

from ivac_proxy.shared.config import Settings
from ivac_proxy.shared.models import InboundRequest, OutboundRequest, ProxyResponse
from ivac_proxy.proxy_service.body import ReplayableBody
from ivac_proxy.proxy_service.request_transformer import RequestTransformer


async def _stream(*chunks: bytes):
    for chunk in chunks:
        yield chunk


async def _collect(body) -> bytes:
    return b"".join([chunk async for chunk in body])


@pytest.fixture
def transformer():
    return RequestTransformer(Settings(upstream_origin="https://payment.ivacbd.com"))


def test_target_url_appends_path_and_query(transformer):
    result = transformer.transform(InboundRequest(method="GET", path="/api/slots", query="date=2024-01-01&x=1"))

    assert isinstance(result, OutboundRequest)
    assert result.url == "https://payment.ivacbd.com/api/slots?date=2024-01-01&x=1"


def test_target_url_without_query_has_no_question_mark(transformer):
    result = transformer.transform(InboundRequest(method="GET", path="/"))

    assert result.url == "https://payment.ivacbd.com/"


def test_spoofed_headers_are_replaced_with_origin_values(transformer):
    inbound = InboundRequest(
        method="POST",
        path="/api/foo",
        headers=[
            ("host", "localhost:5000"),
            ("Origin", "http://evil.example"),
            ("REFERER", "http://evil.example/page"),
            ("user-agent", "curl/8.0"),
            ("content-type", "application/json"),
            ("authorization", "Bearer abc"),
        ],
    )

    result = transformer.transform(inbound)

    assert result.headers == {
        "content-type": "application/json",
        "authorization": "Bearer abc",
        "Host": "payment.ivacbd.com",
        "Referer": "https://payment.ivacbd.com",
        "Origin": "https://payment.ivacbd.com",
    }
    assert "user-agent" not in {key.lower() for key in result.headers}


def test_override_headers_set_even_when_inbound_has_none(transformer):
    result = transformer.transform(InboundRequest(method="GET", path="/x"))

    assert result.headers["Host"] == "payment.ivacbd.com"
    assert result.headers["Origin"] == "https://payment.ivacbd.com"
    assert result.headers["Referer"] == "https://payment.ivacbd.com"


@pytest.mark.parametrize("method", ["GET", "HEAD", "get"])
def test_get_and_head_never_carry_a_body(transformer, method):
    result = transformer.transform(InboundRequest(method=method, path="/x", body=_stream(b"ignored")))

    assert result.body is None


@pytest.mark.asyncio
async def test_other_methods_forward_the_inbound_stream(transformer):
    result = transformer.transform(InboundRequest(method="POST", path="/x", body=_stream(b'{"a":', b"1}")))

    assert result.method == "POST"
    assert isinstance(result.body, ReplayableBody)
    assert await _collect(result.body) == b'{"a":1}'


@pytest.mark.parametrize("method", ["GET", "POST", "OPTIONS"])
def test_favicon_short_circuits_with_no_content(transformer, method):
    result = transformer.transform(InboundRequest(method=method, path="/favicon.ico"))

    assert isinstance(result, ProxyResponse)
    assert result.status_code == 204
    assert result.body is None
    assert result.headers == []


@pytest.mark.parametrize("path", ["/", "/api/foo", "/deep/nested/path"])
def test_options_short_circuits_with_preflight(transformer, path):
    result = transformer.transform(InboundRequest(method="OPTIONS", path=path))

    assert isinstance(result, ProxyResponse)
    assert result.status_code == 204
    assert result.body is None
    assert dict(result.headers) == {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type, Authorization",
        "Access-Control-Max-Age": "86400",
    }


def test_browser_accept_encoding_is_not_forwarded(transformer):
    inbound = InboundRequest(
        method="GET",
        path="/api/foo",
        headers=[("Accept-Encoding", "gzip, deflate, br, zstd"), ("accept", "application/json")],
    )

    result = transformer.transform(inbound)

    assert "accept-encoding" not in {key.lower() for key in result.headers}
    assert result.headers["accept"] == "application/json"


def test_percent_escapes_are_kept_verbatim(transformer):
    result = transformer.transform(InboundRequest(method="GET", path="/api/a%23b%3Fc", query="x=%2F"))

    assert result.url == "https://payment.ivacbd.com/api/a%23b%3Fc?x=%2F"
