"""Structured logging utilities for incremental encoding conversion.

Every component logs through a :class:`CorrelationLogger`. Records carry the
component name, the optional correlation ID of the conversion they belong to
and any context bound to the logger, typically the name of the encoding a
decoder or encoder is converting.

The package never configures handlers on import; applications call
:func:`configure_logging` or set up ``logging`` themselves.
"""

import logging
from typing import Any, Dict, Optional


class CorrelationLogger:
    """Logger that automatically includes correlation ID, component and context."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize correlation logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional correlation ID for stream tracking
            component: Component name for structured logging
            context: Fields added to every record, overridable per call
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.split(".")[-1]
        self.context = dict(context or {})

    def bind(self, **context: Any) -> "CorrelationLogger":
        """Return a logger for the same component with extra bound fields.

        Example:
            >>> logger = get_logger(__name__, component="decoder")
            >>> logger.bind(encoding="Shift_JIS").debug("Malformed sequence")
        """
        merged = dict(self.context)
        merged.update(context)
        return CorrelationLogger(
            self.logger.name, self.correlation_id, self.component, merged
        )

    def _get_extra(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        combined_extra = {
            "component": self.component,
            "correlation_id": self.correlation_id,
        }
        combined_extra.update(self.context)
        if extra:
            combined_extra.update(extra)
        return combined_extra

    def is_enabled_for(self, level: int) -> bool:
        """Check whether a record at ``level`` would be emitted."""
        return self.logger.isEnabledFor(level)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log debug message with correlation info."""
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(message, extra=self._get_extra(extra))

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log info message with correlation info."""
        self.logger.info(message, extra=self._get_extra(extra))

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log warning message with correlation info."""
        self.logger.warning(message, extra=self._get_extra(extra))


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None,
) -> CorrelationLogger:
    """Get a correlation-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional correlation ID for stream tracking
        component: Component name for structured logging

    Returns:
        CorrelationLogger instance
    """
    return CorrelationLogger(name, correlation_id, component)


def configure_logging(level: str = "WARNING") -> logging.Handler:
    """Attach a stream handler to the package logger at ``level``.

    Calling it again only changes the level.

    Returns:
        The handler writing the package's records
    """
    package_logger = logging.getLogger("incremental_encoding")
    package_logger.setLevel(getattr(logging, level.upper()))
    for handler in package_logger.handlers:
        if getattr(handler, "_incremental_encoding", False):
            return handler

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(levelname)s [%(component)s] %(message)s "
            "(correlation_id=%(correlation_id)s)"
        )
    )
    handler._incremental_encoding = True  # type: ignore[attr-defined]
    package_logger.addHandler(handler)
    return handler
