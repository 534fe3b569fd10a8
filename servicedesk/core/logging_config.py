"""
Logging Configuration
=====================

Standard library logging with the request correlation id attached to every
record. The correlation middleware sets the id for the current request.
"""
import logging
import sys
from contextvars import ContextVar

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="-")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] [%(correlation_id)s] %(message)s"


def get_correlation_id() -> str:
    """Return the correlation id of the request being handled ('-' outside requests)."""
    return correlation_id_var.get()


class CorrelationIdFilter(logging.Filter):
    """Injects the current correlation id into log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_var.get()
        return True


def configure_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once.

    Args:
        level: Log level name (e.g. "INFO", "DEBUG")
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    for handler in root.handlers:
        if getattr(handler, "_servicedesk", False):
            return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(CorrelationIdFilter())
    handler._servicedesk = True
    root.addHandler(handler)
