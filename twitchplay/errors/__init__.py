"""Error hierarchy and structured error logging helpers."""

from .handling import classify_error, log_error  # noqa: F401
from .internal import (  # noqa: F401
    AuthRejectedError,
    AuthSendError,
    AuthTimeoutError,
    ConnectFailureError,
    ConnectionLostError,
    HostResolutionError,
    InternalError,
    InvalidParametersError,
    JoinError,
    NetworkError,
    SendError,
    SocketCreationError,
)

__all__ = [
    "AuthRejectedError",
    "AuthSendError",
    "AuthTimeoutError",
    "ConnectFailureError",
    "ConnectionLostError",
    "HostResolutionError",
    "InternalError",
    "InvalidParametersError",
    "JoinError",
    "NetworkError",
    "SendError",
    "SocketCreationError",
    "classify_error",
    "log_error",
]
