"""Structured logging configuration for the feed loader."""

import json
import logging
import sys
from datetime import UTC, datetime

# Context fields copied from a record onto the JSON entry when present
CONTEXT_FIELDS = (
    "context_id",
    "component",
    "operation",
    "url",
    "store_path",
    "status_code",
    "items_count",
    "error",
)


class StructuredFormatter(logging.Formatter):
    """Custom formatter for structured JSON logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON."""
        log_entry = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class ComponentLogger:
    """Logger bound to a component name and a context id."""

    def __init__(self, context_id: str, component: str):
        """Initialize component logger.

        Args:
            context_id: Identifier shared by the loggers of one composed loader
            component: Component name (e.g. 'remote_loader', 'codable_store')
        """
        self.context_id = context_id
        self.component = component
        self.logger = logging.getLogger(f"feedloader.{component}")

    def _log_with_context(
        self, level: int, message: str, exc_info=None, **kwargs
    ) -> None:
        extra = {
            "context_id": self.context_id,
            "component": self.component,
            **kwargs,
        }
        self.logger.log(level, message, exc_info=exc_info, extra=extra)

    def info(self, message: str, **kwargs) -> None:
        self._log_with_context(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self._log_with_context(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs) -> None:
        self._log_with_context(logging.ERROR, message, **kwargs)

    def debug(self, message: str, **kwargs) -> None:
        self._log_with_context(logging.DEBUG, message, **kwargs)

    def exception(self, message: str, **kwargs) -> None:
        """Log an error together with the exception currently being handled."""
        self._log_with_context(logging.ERROR, message, exc_info=True, **kwargs)

    def log_load_result(self, source: str, items_count: int) -> None:
        """Log a delivered load with structured data."""
        self.info(
            f"Delivered {items_count} feed items from {source}",
            operation="load",
            items_count=items_count,
        )


def setup_structured_logging(log_level: str = "INFO") -> None:
    """Setup structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    level = getattr(logging, log_level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(StructuredFormatter())
    root_logger.addHandler(console_handler)

    package_logger = logging.getLogger("feedloader")
    package_logger.setLevel(level)
    package_logger.propagate = True


def create_component_logger(
    component: str, context_id: str | None = None
) -> ComponentLogger:
    """Create a component logger.

    Args:
        component: Component name
        context_id: Optional context ID (will generate one if not provided)

    Returns:
        ComponentLogger instance
    """
    if not context_id:
        context_id = f"feed_{datetime.now(UTC).strftime('%Y%m%d_%H%M%S_%f')}"

    return ComponentLogger(context_id, component)
