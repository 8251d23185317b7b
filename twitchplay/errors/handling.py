from __future__ import annotations

from ..logging_config import log_structured_error
from .internal import (
    AuthRejectedError,
    AuthSendError,
    AuthTimeoutError,
    ConnectionLostError,
    InternalError,
    InvalidParametersError,
    JoinError,
    NetworkError,
    SendError,
)


def classify_error(error: BaseException) -> str:
    """Return the structured-logging category for an exception."""
    if isinstance(error, NetworkError | ConnectionLostError | OSError):
        return "network"
    if isinstance(error, AuthRejectedError | AuthSendError | AuthTimeoutError | JoinError):
        return "auth"
    if isinstance(error, SendError):
        return "send"
    if isinstance(error, InvalidParametersError):
        return "config"
    if isinstance(error, InternalError):
        return "internal"
    return "unknown"


def log_error(
    message: str, error: BaseException, context: dict[str, object] | None = None
) -> None:
    """Log ``error`` under its category and record it for the exit summary.

    Structured data carried by an :class:`InternalError` is merged with
    ``context``; explicit context wins on key clashes.

    Args:
        message: A descriptive message about the error context.
        error: The exception instance to be logged.
        context: Optional additional context data for debugging.
    """
    merged: dict[str, object] = {}
    if isinstance(error, InternalError):
        merged.update(error.data)
    if context:
        merged.update(context)
    log_structured_error(
        error_type=classify_error(error),
        message=f"{message}: {error}",
        exception=error,
        context=merged or None,
    )
