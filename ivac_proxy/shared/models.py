"""Data models for the IVAC proxy."""

from typing import Annotated, Any

from pydantic import BaseModel, Field

HeaderList = list[tuple[str, str]]


class InboundRequest(BaseModel):
    """Request as received by the proxy, detached from the ASGI layer."""

    method: Annotated[str, Field(description="HTTP method")]
    path: Annotated[str, Field(description="Request path")]
    query: Annotated[str, Field(description="Query string without the leading '?'")] = ""
    headers: Annotated[HeaderList, Field(description="HTTP headers in arrival order")] = []
    body: Annotated[Any, Field(description="Async byte stream, absent for bodiless requests")] = None


class OutboundRequest(BaseModel):
    """Request descriptor sent to the upstream origin."""

    method: Annotated[str, Field(description="HTTP method")]
    url: Annotated[str, Field(description="Absolute upstream URL")]
    headers: Annotated[dict[str, str], Field(description="HTTP headers")] = {}
    body: Annotated[Any, Field(description="Async byte stream, None for GET and HEAD")] = None


class UpstreamResponse(BaseModel):
    """Response read back from the upstream origin."""

    status_code: Annotated[int, Field(ge=100, le=599, description="HTTP status code")]
    reason: Annotated[str, Field(description="HTTP status text")] = ""
    headers: Annotated[HeaderList, Field(description="Response headers")] = []
    body: Annotated[bytes, Field(description="Response body")] = b""


class ProxyResponse(BaseModel):
    """Response the proxy sends back to its caller."""

    status_code: Annotated[int, Field(ge=100, le=599, description="HTTP status code")]
    status_text: Annotated[str, Field(description="HTTP status text")] = ""
    headers: Annotated[HeaderList, Field(description="Response headers")] = []
    body: Annotated[bytes | None, Field(description="Response body, None for no content")] = None
