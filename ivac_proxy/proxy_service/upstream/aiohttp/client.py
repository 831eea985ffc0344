"""aiohttp client session for the upstream origin."""

import aiohttp

from ivac_proxy.shared.logging import get_logger

logger = get_logger(__name__)


async def setup_session() -> aiohttp.ClientSession:
    """Open the pooled client session used for all upstream requests."""
    # Host/Origin/Referer are set explicitly, cookies are relayed verbatim.
    session = aiohttp.ClientSession(cookie_jar=aiohttp.DummyCookieJar())
    logger.info("Upstream client session opened")

    return session


async def cleanup_session(session: aiohttp.ClientSession | None):
    """Close the upstream client session."""
    if session:
        await session.close()
        logger.info("Upstream client session closed")
