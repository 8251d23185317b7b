"""Centralized internal error hierarchy.

These exceptions give semantic categories to the failures of a chat
connection. The transport raises them at the socket boundary and the
connection worker maps each one to exactly one connection event, so raw
``OSError`` / ``socket.gaierror`` values never escape the worker.

Classes:
  InternalError           – Base for all internal errors.
  InvalidParametersError  – Empty or invalid credentials (caught before a worker exists).
  NetworkError            – Transport level failure while establishing the connection.
  HostResolutionError     – DNS lookup of the chat host failed.
  SocketCreationError     – The OS refused to create a socket.
  ConnectFailureError     – TCP connect was refused or timed out.
  AuthSendError           – PASS/NICK could not be written.
  AuthRejectedError       – Server answered the handshake with something other than the welcome.
  AuthTimeoutError        – No handshake reply within the configured auth timeout.
  JoinError               – JOIN after authentication could not be written.
  ConnectionLostError     – The peer closed or reset an established connection.
  SendError               – A single outbound line could not be written (non-fatal).
"""

from __future__ import annotations

from collections.abc import Mapping


class InternalError(Exception):
    """Base class for all internal errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class InvalidParametersError(InternalError):
    """Raised when the token or username is empty or invalid."""


class NetworkError(InternalError):
    """Exception raised for transport errors while opening the connection.

    These are the failures that a connect retry policy may attempt again.
    """


class HostResolutionError(NetworkError):
    """The chat host name could not be resolved."""


class SocketCreationError(NetworkError):
    """A TCP socket could not be created."""


class ConnectFailureError(NetworkError):
    """The TCP connection to the chat server could not be established."""


class AuthSendError(InternalError):
    """The initial PASS and NICK lines could not be sent."""


class AuthRejectedError(InternalError):
    """The server replied to the handshake with a non-welcome line.

    Attributes:
        server_line: The first line the server sent back.
    """

    def __init__(self, server_line: str) -> None:
        super().__init__(server_line, data={"server_line": server_line})
        self.server_line = server_line


class AuthTimeoutError(InternalError):
    """No reply to the handshake arrived within the configured auth timeout."""


class JoinError(InternalError):
    """The JOIN for the configured channel could not be sent."""


class ConnectionLostError(InternalError):
    """An established connection was closed or reset by the peer."""


class SendError(InternalError):
    """A single outbound line failed to send. Never tears the connection down."""


__all__ = [
    "InternalError",
    "InvalidParametersError",
    "NetworkError",
    "HostResolutionError",
    "SocketCreationError",
    "ConnectFailureError",
    "AuthSendError",
    "AuthRejectedError",
    "AuthTimeoutError",
    "JoinError",
    "ConnectionLostError",
    "SendError",
]
