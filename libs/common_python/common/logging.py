"""Shared logging utilities.

Every service and job calls `configure_logging` once from its entrypoint so
that:
- all components emit the same line format, tagged with the service name,
- log levels are configured in one place (`LOG_LEVEL`),
- repeated configuration (tests, reloads) does not stack handlers.

Modules get their logger through `get_logger(__name__)`.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(service)s] %(name)s: %(message)s"

_HANDLER_NAME = "common-stream"


class _ServiceFilter(logging.Filter):
    """Stamp every record with the service name used in LOG_FORMAT."""

    def __init__(self, service: str):
        super().__init__()
        self.service = service

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "service"):
            record.service = self.service
        return True


def configure_logging(service: str, level: str | int = "INFO") -> logging.Logger:
    """Configure the root logger for a service process.

    Args:
        service: Short component name, e.g. "api" or "seed".
        level: Log level name or number.

    Returns:
        logging.Logger: The configured root logger.
    """
    root = logging.getLogger()
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root.setLevel(level)

    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(_ServiceFilter(service))
    root.addHandler(handler)
    return root


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
