"""
Structured Logging
==================

One JSON object per log line, written to stdout.

Every line carries the request's correlation id (when logged inside a
request), the deployment environment and an ISO-8601 UTC timestamp.
Values under keys that look like credentials are masked.

Usage:
    from helpdesk.shared.infrastructure.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Ticket updated", extra={"ticket_id": 42, "version": 3})
"""

import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any

from pythonjsonlogger import jsonlogger

# Set by CorrelationIDMiddleware for the duration of a request
correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)

REDACTED = "***REDACTED***"
SENSITIVE_KEY_PARTS = ("password", "secret", "token")

# Third-party loggers that are too chatty at INFO
QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "passlib": logging.ERROR,
}


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter that stamps each record with request and deployment context.
    """

    def __init__(self, *args: Any, environment: str = "unknown", **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.environment = environment

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
        log_record["environment"] = self.environment

        # An explicit extra wins over the request context
        if "correlation_id" not in log_record:
            correlation_id = correlation_id_var.get()
            if correlation_id is not None:
                log_record["correlation_id"] = correlation_id

        for key, value in log_record.items():
            if isinstance(value, str) and any(part in key.lower() for part in SENSITIVE_KEY_PARTS):
                log_record[key] = REDACTED


def setup_logging(level: str = "INFO", environment: str = "development") -> None:
    """
    Route all logging through a single stdout JSON handler.

    Safe to call more than once; previously installed root handlers are
    replaced.

    Args:
        level: Root level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        environment: Deployment name stamped on every line
    """
    numeric_level = logging.getLevelName(level.upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(CustomJsonFormatter(
        fmt="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        environment=environment,
    ))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(numeric_level)

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)


def get_logger(name: str) -> logging.Logger:
    """Module logger; call with ``__name__``."""
    return logging.getLogger(name)
