"""
Logging configuration for the server process.

Sets up structured logging with a consistent format. The uvicorn server
runs in its own thread, so the thread name is part of every line.
Logging must not change program behavior.
Never logs sensitive data (request bodies, auth settings, raw payloads).
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(threadName)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ACCESS_LOGGER = "apiboot.access"


def configure_logging(level: str = "INFO", access_log: bool = True) -> None:
    """Configure process-wide logging for a server run.

    Args:
        level: The log level string (DEBUG, INFO, WARNING, ERROR).
        access_log: Emit one line per request from RequestLoggerMiddleware.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )

    # uvicorn's access log duplicates ours; its error log keeps bind failures
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.ERROR)
    logging.getLogger(ACCESS_LOGGER).setLevel(
        logging.NOTSET if access_log else logging.WARNING
    )
