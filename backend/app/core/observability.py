"""
Observability: logging setup and request middleware.

Adds correlation IDs and structured logging context to requests.
"""

import json
import logging
import sys
import time
import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

# Configure structured logger
logger = logging.getLogger("storefront")

# LogRecord attributes that are not user-supplied `extra` context
_RESERVED_ATTRS = set(vars(logging.makeLogRecord({})).keys()) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """One JSON object per line, including any `extra=` context."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(level: str = "INFO", log_format: str = "console") -> None:
    """
    Configure the `storefront` logger tree.

    Args:
        level: DEBUG, INFO, WARNING, ERROR
        log_format: "json" for log aggregation, "console" for humans
    """
    handler = logging.StreamHandler(sys.stdout)
    if log_format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s %(name)s %(message)s"))

    logger.handlers = [handler]
    logger.setLevel(level.upper())
    logger.propagate = False


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """Correlation ID, timing and one access log line per request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        # Caller-supplied ID wins
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        request.state.correlation_id = correlation_id

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - started) * 1000, 2)

        response.headers["X-Correlation-ID"] = correlation_id
        response.headers["X-Process-Time"] = str(duration_ms)

        log_data = {
            "correlation_id": correlation_id,
            "method": request.method,
            "path": request.url.path,
            "query": str(request.url.query) or None,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
            "actor": request.headers.get("X-Actor"),
        }

        if response.status_code >= 500:
            logger.error("request_failed", extra=log_data)
        elif response.status_code >= 400:
            logger.warning("request_rejected", extra=log_data)
        else:
            logger.info("request_completed", extra=log_data)

        return response
