"""
Structured logging configuration for the configurator.

Uses structlog for machine-parseable output. Each HTTP request gets a
``request_id`` bound through structlog context variables, so every event
logged while serving it (pricing, quote changes, Business Central calls,
retries) carries the same id.
"""

import logging
import sys
import time
from typing import Any
from uuid import uuid4

import structlog
from structlog.types import Processor

from mdf_cpq.config.settings import settings


def setup_logging() -> None:
    """
    Configure structured logging for the application.

    JSON output when ``LOG_FORMAT=json``, colored console output otherwise.
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.log_format == "json":
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level.upper()),
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


class RequestLogger:
    """
    Request logging for the FastAPI middleware.

    ``start`` binds a request id into the structlog context and returns it;
    ``finish`` logs the outcome and clears the context again.
    """

    def __init__(self):
        self.logger = get_logger("request")

    def start(self, method: str, path: str, request_id: str | None = None) -> str:
        request_id = request_id or uuid4().hex
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        self.logger.info("request_received", method=method, path=path)
        return request_id

    def finish(self, method: str, path: str, status_code: int, started: float) -> None:
        duration_ms = (time.perf_counter() - started) * 1000
        # 4xx and 5xx answers are worth a look, successful ones are routine
        log_method = self.logger.info if status_code < 400 else self.logger.warning
        log_method(
            "request_completed",
            method=method,
            path=path,
            status_code=status_code,
            duration_ms=round(duration_ms, 2),
        )
        structlog.contextvars.clear_contextvars()


class ServiceLogger:
    """
    Service-level logging for configurator operations.

    Operations are logged as ``<operation>_started`` / ``<operation>_completed``
    pairs; ``log_operation_start`` returns a timestamp that
    ``log_operation_complete`` turns into ``duration_ms``. Business Central
    failures and retries have dedicated helpers so their fields (kind,
    status code, delay) are named the same everywhere.
    """

    def __init__(self, service_name: str):
        self.logger = get_logger(f"service.{service_name}")
        self.service_name = service_name

    def log_operation_start(self, operation: str, **kwargs: Any) -> float:
        self.logger.info(f"{operation}_started", service=self.service_name, **kwargs)
        return time.perf_counter()

    def log_operation_complete(self, operation: str, started: float | None = None, **kwargs: Any) -> None:
        if started is not None:
            kwargs["duration_ms"] = round((time.perf_counter() - started) * 1000, 2)
        self.logger.info(f"{operation}_completed", service=self.service_name, **kwargs)

    def log_api_failure(self, operation: str, error: Exception, **kwargs: Any) -> None:
        """Log a classified Business Central failure (``ApiError``)."""
        kind = getattr(error, "kind", None)
        self.logger.error(
            f"{operation}_failed",
            service=self.service_name,
            kind=getattr(kind, "value", kind),
            status_code=getattr(error, "status_code", None),
            error_message=getattr(error, "message", str(error)),
            **kwargs,
        )

    def log_retry(self, operation: str, attempt: int, delay_s: float | None, kind: Any = None) -> None:
        self.logger.warning(
            f"{operation}_retry",
            service=self.service_name,
            attempt=attempt,
            kind=getattr(kind, "value", kind),
            delay_ms=round(delay_s * 1000) if delay_s is not None else None,
        )

    def log_event(self, event: str, **kwargs: Any) -> None:
        """Log a domain event such as a quote line change or an export."""
        self.logger.info(event, service=self.service_name, **kwargs)


request_logger = RequestLogger()
