"""Structured JSON logging with event correlation."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from multi_tenant.context import get_current_event


class StructuredLogFormatter(logging.Formatter):
    """
    JSON log formatter with event correlation.

    Outputs logs in JSON format with:
    - Standard log fields (timestamp, level, message, logger)
    - Event context (event, client_id, team)
    - Exception information
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as JSON."""
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        ctx = get_current_event()
        if ctx:
            log_entry["event"] = ctx.event.value
            log_entry["client_id"] = ctx.client_id
            if ctx.team:
                log_entry["team"] = ctx.team

        log_entry["location"] = {
            "file": record.filename,
            "line": record.lineno,
            "function": record.funcName,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class EventContextFilter(logging.Filter):
    """
    Logging filter that adds event context to log records.

    Makes `event`, `client_id` and `team` usable in plain format strings.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Add context fields to the log record."""
        ctx = get_current_event()
        record.event = ctx.event.value if ctx else ""
        record.client_id = ctx.client_id if ctx else ""
        record.team = (ctx.team if ctx else None) or "-"
        return True


def configure_logging(
    level: str = "INFO",
    json_format: bool = True,
    module_levels: dict[str, str] | None = None,
) -> None:
    """
    Configure structured logging for the plugin.

    Args:
        level: Default log level.
        json_format: If True, use JSON format. Otherwise, use standard format.
        module_levels: Per-module log levels (e.g., {"multi_tenant.resolver": "DEBUG"}).
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)

    if json_format:
        handler.setFormatter(StructuredLogFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - [%(event)s %(client_id)s team=%(team)s] %(message)s"
        ))

    handler.addFilter(EventContextFilter())
    root_logger.addHandler(handler)

    if module_levels:
        for module, mod_level in module_levels.items():
            logging.getLogger(module).setLevel(getattr(logging, mod_level.upper()))

    logging.info(
        f"Logging configured: level={level}, json={json_format}, "
        f"module_levels={module_levels or {}}"
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the given name.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)
