"""Proxy service entry point."""

from contextlib import asynccontextmanager

import uvicorn
from starlette.applications import Starlette
from starlette.routing import Route

from ivac_proxy.shared.config import Settings, get_settings
from ivac_proxy.shared.logging import get_logger, setup_logging
from ivac_proxy.proxy_service.handlers import ProxyRequestHandler, proxy_request_handler
from ivac_proxy.proxy_service.middleware import RequestLoggingMiddleware
from ivac_proxy.proxy_service.upstream.aiohttp.client import cleanup_session, setup_session
from ivac_proxy.proxy_service.upstream.aiohttp.transport import AiohttpUpstreamTransport
from ivac_proxy.proxy_service.upstream.base_transport import UpstreamTransport

logger = get_logger(__name__)

PROXIED_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]


def create_app(settings: Settings | None = None, transport: UpstreamTransport | None = None) -> Starlette:
    """
    Create and configure the proxy application.

    Args:
        settings: Settings to use instead of the environment-loaded ones
        transport: Upstream transport to use; when omitted an aiohttp session
            is opened on startup and closed on shutdown
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: Starlette):
        """Manage application lifecycle (startup/shutdown)."""
        setup_logging(settings.log_level)
        logger.info("Starting IVAC proxy")
        logger.info(f"Upstream origin: {settings.upstream_origin}")

        session = None
        if app.state.upstream_transport is None:
            session = await setup_session()
            app.state.upstream_transport = AiohttpUpstreamTransport(session, timeout=settings.request_timeout)

        yield

        if session is not None:
            await cleanup_session(session)
            app.state.upstream_transport = None
        logger.info("IVAC proxy stopped")

    app = Starlette(
        debug=False,
        routes=[
            Route(
                "/{path:path}",
                proxy_request_handler,
                methods=PROXIED_METHODS,
            ),
        ],
        lifespan=lifespan,
    )
    app.state.upstream_transport = transport
    app.state.proxy_handler = ProxyRequestHandler(settings)

    app.add_middleware(RequestLoggingMiddleware)

    return app


app = create_app()


def main() -> None:
    """Entry point for the proxy server."""
    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info(f"Listening on http://{settings.host}:{settings.port}")

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        loop="auto",
        log_config=None,
    )


if __name__ == "__main__":
    main()
