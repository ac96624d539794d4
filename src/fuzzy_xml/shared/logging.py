"""Structured logging utilities for fuzzy XML parsing.

Loggers returned here attach the component name and an optional correlation
ID to every record so that parse runs can be traced through log output.
"""

import logging
import sys
from typing import Any, Dict, MutableMapping, Optional, TextIO, Tuple

LOG_FORMAT = (
    "%(asctime)s %(levelname)s [%(component)s] %(message)s"
    " (correlation_id=%(correlation_id)s)"
)

_HANDLER_NAME = "fuzzy_xml"


class CorrelationLogger(logging.LoggerAdapter):
    """Logger that automatically includes correlation ID and component information."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Initialize correlation logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional correlation ID for request tracking
            component: Component name for structured logging
        """
        self.correlation_id = correlation_id
        self.component = component or name.split(".")[-1]
        super().__init__(
            logging.getLogger(name),
            {"component": self.component, "correlation_id": correlation_id},
        )

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        """Merge call-site extra data under the correlation fields."""
        combined: Dict[str, Any] = dict(self.extra or {})
        combined.update(kwargs.get("extra") or {})
        kwargs["extra"] = combined
        return msg, kwargs


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> CorrelationLogger:
    """Get a correlation-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional correlation ID for request tracking
        component: Component name for structured logging

    Returns:
        CorrelationLogger instance
    """
    return CorrelationLogger(name, correlation_id, component)


class _CorrelationDefaults(logging.Filter):
    """Fill in correlation fields for records from plain loggers."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "component"):
            record.component = record.name.split(".")[-1]
        if not hasattr(record, "correlation_id"):
            record.correlation_id = None
        return True


def configure_logging(level: str = "WARNING", stream: Optional[TextIO] = None) -> None:
    """Install a single stream handler on the package logger.

    Calling this more than once replaces the previously installed handler
    instead of stacking a new one.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        stream: Output stream, stderr when omitted
    """
    package_logger = logging.getLogger("fuzzy_xml")
    for handler in list(package_logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            package_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(_CorrelationDefaults())

    package_logger.addHandler(handler)
    package_logger.setLevel(level.upper())
