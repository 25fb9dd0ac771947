"""
Observability helpers.

Logging setup plus a middleware that tags every request with a correlation ID
and the owning tenant, and emits one structured log line per request.

Formats (``LOG_FORMAT`` setting):
- console: human-readable line with the structured fields appended
- json: one JSON object per line for log aggregation
"""

import json
import time
import uuid
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from backend.app.core.config import settings

logger = logging.getLogger("ledger.request")

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s %(message)s"

# Attributes every LogRecord has; anything else came in through ``extra=``
STANDARD_ATTRS = frozenset({
    "name", "msg", "args", "levelname", "levelno", "pathname",
    "filename", "module", "lineno", "funcName", "created",
    "msecs", "relativeCreated", "thread", "threadName",
    "processName", "process", "exc_info", "exc_text", "stack_info",
    "message", "asctime", "taskName",
})


def record_extras(record: logging.LogRecord) -> Dict[str, Any]:
    """Fields passed to the logger through ``extra=``."""
    return {key: value for key, value in record.__dict__.items() if key not in STANDARD_ATTRS}


class ConsoleFormatter(logging.Formatter):
    """Plain log line followed by the record's extra fields as JSON."""

    def __init__(self):
        super().__init__(LOG_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = record_extras(record)
        if extras:
            line = f"{line} {json.dumps(extras, default=str, sort_keys=True)}"
        return line


class JsonFormatter(logging.Formatter):
    """
    JSON log formatter for structured logging.

    Outputs JSON lines with timestamp, level, logger, message and, under
    ``extra``, any fields passed to the logger.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        extras = record_extras(record)
        if extras:
            log_entry["extra"] = extras

        return json.dumps(log_entry, default=str)


def build_formatter(log_format: str = None) -> logging.Formatter:
    if (log_format or settings.log_format).lower() == "json":
        return JsonFormatter()
    return ConsoleFormatter()


def configure_logging(level: str = None, log_format: str = None) -> None:
    """Configure root logging once, using the level and format from settings by default."""
    handler = logging.StreamHandler()
    handler.setFormatter(build_formatter(log_format))
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        handlers=[handler],
    )


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get("X-Correlation-ID", str(uuid.uuid4()))
        start_time = time.perf_counter()

        response = await call_next(request)

        process_time = (time.perf_counter() - start_time) * 1000  # ms
        response.headers["X-Correlation-ID"] = correlation_id
        response.headers["X-Process-Time"] = str(process_time)

        log_data = {
            "correlation_id": correlation_id,
            "owner_id": request.headers.get("X-Owner-ID"),
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round(process_time, 2),
        }

        # Log level based on status
        if response.status_code >= 500:
            logger.error("Request Failed", extra=log_data)
        elif response.status_code >= 400:
            logger.warning("Request Rejected", extra=log_data)
        else:
            logger.info("Request Served", extra=log_data)

        return response
