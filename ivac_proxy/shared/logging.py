"""Logging configuration for the IVAC proxy."""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# uvicorn loggers that should go through the proxy's own handler.
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def setup_logging(level: int | str = logging.INFO) -> None:
    """
    Send all proxy and server logs to stdout in one format.

    Existing root handlers are replaced, so repeated calls (every app
    startup) never duplicate output. uvicorn's access log is raised to
    WARNING because RequestLoggingMiddleware already logs each request
    with its elapsed time.

    Args:
        level: Level name or number, e.g. "debug" or logging.DEBUG
    """
    if isinstance(level, str):
        level = level.upper()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.propagate = True
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a proxy module (pass ``__name__``)."""
    return logging.getLogger(name)
