"""
Centralized logging utilities for Flowlab assistant services.

Supports both JSON (production) and text (development) log formats.
JSON format is used in containers so log aggregation can filter on
flow ids, model ids and cache keys.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

LOG_FORMAT_TEXT = "%(asctime)s - %(service)s - %(levelname)s - %(message)s"

# Attributes every LogRecord carries; anything else came in through `extra`.
_RESERVED_ATTRS = frozenset({
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName", "relativeCreated",
    "thread", "threadName", "exc_info", "exc_text", "stack_info",
    "taskName", "service", "payload",
})


def _effective_format() -> str:
    return os.getenv("LOG_FORMAT", "text").lower()


def _effective_level(default: int) -> int:
    name = os.getenv("LOG_LEVEL")
    if not name:
        return default
    resolved = logging.getLevelName(name.upper())
    return resolved if isinstance(resolved, int) else default


class ServiceFilter(logging.Filter):
    """Injects the service name into log records."""

    def __init__(self, service_name: str) -> None:
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "service"):
            record.service = self.service_name
        return True


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging in production.

    Promotes keys from extra={"payload": {...}} to top-level JSON fields
    so entries can be filtered by flow_id, model or cache key.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": getattr(record, "service", "unknown"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        payload = getattr(record, "payload", None)
        if isinstance(payload, dict):
            log_data.update(payload)

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key.startswith("_"):
                continue
            log_data[key] = value

        return json.dumps(log_data, ensure_ascii=False, default=str)


def get_logger(service_name: str, name: Optional[str] = None, level: int = logging.INFO) -> logging.Logger:
    """
    Configure and return a logger that writes to stdout with consistent format.

    Format is determined by the LOG_FORMAT environment variable:
    - "json": structured JSON logs for production
    - "text" (default): human-readable logs for development

    Args:
        service_name: Logical service identifier (e.g., "assistant", "llm_client").
        name: Optional logger name; defaults to service_name.
        level: Logging level; overridden by LOG_LEVEL when set.

    Example:
        logger.info("Cache hit", extra={"payload": {"flow_id": "flow-1", "key": "ab12cd34"}})
    """
    logger_name = name or service_name
    logger = logging.getLogger(logger_name)
    logger.setLevel(_effective_level(level))
    logger.propagate = False

    if logger.handlers:
        # Reconfigure if format changed
        logger.handlers = []

    handler = logging.StreamHandler(sys.stdout)
    if _effective_format() == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(LOG_FORMAT_TEXT))

    handler.addFilter(ServiceFilter(service_name))
    logger.addHandler(handler)

    return logger
