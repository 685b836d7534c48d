"""Logging helpers that tag every record with the request's correlation ID.

The HTTP middleware stores the incoming X-Correlation-ID (or a fresh UUID)
in a context variable; CorrelationIdFilter copies it onto each record and
StructuredFormatter prints it as a prefix, so all lines of one request can
be grepped together.

    from roomrate.utils.logging import get_logger, log_booking_operation

    logger = get_logger(__name__)
    log_booking_operation(logger, "create_booking", reservation_id="RES-2025-1A2B3C4D")
"""

import logging
import uuid
from contextvars import ContextVar
from typing import Any

NO_CORRELATION_ID = "no-correlation-id"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Per-request (and per-task) storage
_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def generate_correlation_id() -> str:
    return uuid.uuid4().hex


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Use the given correlation ID for this context, or a new one if empty.

    Returns:
        The ID now in effect
    """
    value = correlation_id or generate_correlation_id()
    _correlation_id.set(value)
    return value


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def clear_correlation_id() -> None:
    _correlation_id.set(None)


def _tag(record: logging.LogRecord) -> str:
    tag = getattr(record, "correlation_id", None) or get_correlation_id() or NO_CORRELATION_ID
    record.correlation_id = tag
    return tag


class CorrelationIdFilter(logging.Filter):
    """Sets record.correlation_id from the current context."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or NO_CORRELATION_ID
        return True


class StructuredFormatter(logging.Formatter):
    """Prefixes each formatted line with [correlation_id]."""

    def format(self, record: logging.LogRecord) -> str:
        tag = _tag(record)
        return f"[{tag}] {super().format(record)}"


def get_logger(name: str) -> logging.Logger:
    """logging.getLogger with a CorrelationIdFilter attached once."""
    logger = logging.getLogger(name)
    if not any(isinstance(f, CorrelationIdFilter) for f in logger.filters):
        logger.addFilter(CorrelationIdFilter())
    return logger


def configure_logging(level: str | int = logging.INFO) -> None:
    """Install the structured formatter on the root logger.

    Calling it again only updates the level.
    """
    root = logging.getLogger()
    root.setLevel(level)

    if any(isinstance(h.formatter, StructuredFormatter) for h in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter(LOG_FORMAT))
    handler.addFilter(CorrelationIdFilter())
    root.addHandler(handler)


def log_booking_operation(
    logger: logging.Logger,
    operation: str,
    *,
    reservation_id: str | None = None,
    room_id: str | None = None,
    user_id: str | None = None,
    amount: int | None = None,
    status: str | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    """Log one booking state change, or a refusal when error is set.

    The message reads "Booking operation: <operation> | key=value | ...";
    the same fields are attached to the record as extras. Refusals are
    logged at WARNING, everything else at INFO.

    Args:
        logger: Logger to write to
        operation: e.g. "create_booking", "cancel_booking"
        reservation_id: Affected reservation
        room_id: Affected room
        user_id: Acting guest
        amount: Amount in currency units
        status: Resulting reservation or payment status
        error: Error code of a refused operation
        **extra: Any other fields worth recording
    """
    fields: dict[str, Any] = {
        "reservation_id": reservation_id,
        "room_id": room_id,
        "user_id": user_id,
        "amount": amount,
        "status": status,
        "error": error,
    }
    context = {key: value for key, value in fields.items() if value is not None and value != ""}
    context.update(extra)

    message = " | ".join(
        [f"Booking operation: {operation}", *(f"{key}={value}" for key, value in context.items())]
    )
    level = logging.WARNING if error else logging.INFO
    logger.log(level, message, extra={"operation": operation, **context})
