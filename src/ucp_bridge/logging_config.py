"""Structured logging with request correlation for the UCP bridge.

This module provides:
- Context variables carrying request id, checkout id and calling agent
- A filter that copies them onto every log record
- A JSON formatter emitting one object per line
"""
from __future__ import annotations

import json
import logging
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Iterator, Optional

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
checkout_id_var: ContextVar[Optional[str]] = ContextVar("checkout_id", default=None)
ucp_agent_var: ContextVar[Optional[str]] = ContextVar("ucp_agent", default=None)

_CONTEXT_FIELDS = ("request_id", "checkout_id", "ucp_agent")

_RESERVED_ATTRS = frozenset({
    "name",
    "msg",
    "args",
    "created",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "thread",
    "threadName",
    "taskName",
    "exc_info",
    "exc_text",
    "stack_info",
    *_CONTEXT_FIELDS,
})


class CorrelationFilter(logging.Filter):
    """Logging filter that adds request correlation context to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        record.checkout_id = checkout_id_var.get()
        record.ucp_agent = ucp_agent_var.get()
        return True


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for name in _CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value:
                log_data[name] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # extra={...} fields
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_data[key] = value

        return json.dumps(log_data, default=str)


def setup_logging(
    level: str = "INFO",
    json_format: bool = True,
    log_file: Optional[str] = None,
) -> None:
    """
    Configure logging for the bridge.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON structured logging (True) or a plain format (False)
        log_file: Optional file path for logging output
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if json_format:
        formatter: logging.Formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - "
            "[%(request_id)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(CorrelationFilter())
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(CorrelationFilter())
        root_logger.addHandler(file_handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


@contextmanager
def bind_request_context(
    request_id: Optional[str] = None,
    checkout_id: Optional[str] = None,
    ucp_agent: Optional[str] = None,
) -> Iterator[str]:
    """Bind correlation context for the duration of one request.

    Yields the request id in effect (generated when not supplied).
    """
    rid = request_id or uuid.uuid4().hex
    tokens = [
        (request_id_var, request_id_var.set(rid)),
        (checkout_id_var, checkout_id_var.set(checkout_id)),
        (ucp_agent_var, ucp_agent_var.set(ucp_agent)),
    ]
    try:
        yield rid
    finally:
        for var, token in reversed(tokens):
            var.reset(token)


__all__ = [
    "request_id_var",
    "checkout_id_var",
    "ucp_agent_var",
    "CorrelationFilter",
    "StructuredFormatter",
    "setup_logging",
    "bind_request_context",
]
