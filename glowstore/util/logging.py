"""Structured logging utility for the glow persistence service."""

import logging
from typing import Any, Dict

from ..core.config import LOG_LEVEL

MAX_LOGGED_VALUE = 50


class StructuredLogger:
    """Structured logger for glow store operations."""

    def __init__(self, name: str = "glow_store", level: str = LOG_LEVEL):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level, logging.INFO))

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None, level: int = logging.INFO):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        self.logger.log(level, message)

    def log_glow_operation(self, operation: str, object_id: str, status: str = "success",
                           data: str = None, details: Dict[str, Any] = None):
        """Log a glow store operation, correlated to the object id it touched."""
        log_details = {"object_id": object_id}
        if data is not None:
            log_details["data"] = truncate(data)
        if details:
            log_details.update(details)

        if status in ("failed", "error"):
            level = logging.ERROR
        elif status in ("invalid", "conflict"):
            level = logging.WARNING
        else:
            level = logging.INFO
        self.log_operation(f"glow.{operation}", status, log_details, level)

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str, exc_info: bool = False) -> None:
        """Log an error message."""
        self.logger.error(message, exc_info=exc_info)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)


def truncate(value: Any, limit: int = MAX_LOGGED_VALUE) -> Any:
    """Shorten long strings for log lines."""
    if isinstance(value, str) and len(value) > limit:
        return value[:limit - 3] + "..."
    return value


# Global logger instance
logger = StructuredLogger()
