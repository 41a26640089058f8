"""
Vibrant Palette Structured Logging
loguru sink configuration and request-scoped log helpers.
"""
import sys
from typing import Any, Optional

from loguru import logger

from vibrant.config import config

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {message} | {extra}"


class RequestLogger:
    """Logs every message with the request id and call fields bound as extra."""

    def __init__(self, request_id: str, **fields: Any):
        self.request_id = request_id
        self._logger = logger.bind(request_id=request_id, **fields)

    def bind(self, **fields: Any) -> "RequestLogger":
        """Return a logger carrying additional fields."""
        child = RequestLogger.__new__(RequestLogger)
        child.request_id = self.request_id
        child._logger = self._logger.bind(**fields)
        return child

    def debug(self, message: str, **fields: Any):
        self._logger.bind(**fields).debug(message)

    def info(self, message: str, **fields: Any):
        self._logger.bind(**fields).info(message)

    def warning(self, message: str, **fields: Any):
        self._logger.bind(**fields).warning(message)

    def error(self, message: str, **fields: Any):
        self._logger.bind(**fields).error(message)


_configured = False


def configure_logging(level: Optional[str] = None, serialize: bool = False) -> None:
    """
    Replace loguru's default sink with the structured stdout sink.

    Args:
        level: Minimum level, defaults to ``config.LOG_LEVEL``
        serialize: Emit JSON records instead of the text format
    """
    global _configured
    logger.remove()
    logger.add(
        sys.stdout,
        format=LOG_FORMAT,
        level=level or config.LOG_LEVEL,
        serialize=serialize
    )
    _configured = True


def get_logger(request_id: str, **fields: Any) -> RequestLogger:
    """Get a request-scoped logger, configuring sinks on first use."""
    if not _configured:
        configure_logging()
    return RequestLogger(request_id, **fields)
