"""Structured logging."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

_NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


class JSONFormatter(logging.Formatter):
    """Render log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, ensure_ascii=False)


def setup_logging(
    level: str = "INFO",
    json_output: bool = True,
    silence_noisy_loggers: bool = False,
) -> None:
    """Configure the root logger once for the whole application."""
    handler = logging.StreamHandler(sys.stdout)
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s")
        )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    if silence_noisy_loggers:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


class StructuredLogger:
    """Structured logger for verification and store events."""

    def __init__(self, name: str = __name__):
        """Initialize structured logger."""
        self.logger = logging.getLogger(name)

    def log_step(
        self,
        step: str,
        state: dict[str, Any],
        duration_ms: float | None = None,
    ) -> None:
        """Log a processing step."""
        log_data: dict[str, Any] = {
            "step": step,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "state": state,
        }
        if duration_ms:
            log_data["duration_ms"] = duration_ms

        self.logger.info(json.dumps(log_data))

    def log_error(
        self,
        step: str,
        error: Exception,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Log a failed step, with the store operation when the error names one."""
        log_data: dict[str, Any] = {
            "step": step,
            "error": str(error),
            "error_type": type(error).__name__,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        operation = getattr(error, "operation", None)
        if operation:
            log_data["operation"] = operation
        if context:
            log_data["context"] = context

        self.logger.error(json.dumps(log_data), exc_info=True)
