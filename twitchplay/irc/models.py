"""Shared IRC data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class ConnectionState(Enum):
    DISCONNECTED = auto()
    CONNECTING = auto()
    AUTHENTICATING = auto()
    JOINING = auto()
    CONNECTED = auto()
    FAILED = auto()
    DISCONNECTED_BY_REQUEST = auto()


class ConnectionEventType(Enum):
    # A connection and authentication was established.
    CONNECTED = auto()
    FAILED_TO_CONNECT = auto()
    FAILED_TO_AUTHENTICATE = auto()
    # A general error, doesn't mean the connection was terminated.
    ERROR = auto()
    # General message from the server.
    MESSAGE = auto()
    DISCONNECTED = auto()
    # The joined channel changed after a join request was processed.
    CHANNEL_CHANGED = auto()


TERMINAL_EVENT_TYPES = frozenset(
    {
        ConnectionEventType.FAILED_TO_CONNECT,
        ConnectionEventType.FAILED_TO_AUTHENTICATE,
        ConnectionEventType.DISCONNECTED,
    }
)


@dataclass(frozen=True, slots=True)
class ConnectionEvent:
    type: ConnectionEventType
    message: str = ""
    # Joined channel as seen by the worker when the event was produced.
    channel: str = ""

    @property
    def is_terminal(self) -> bool:
        return self.type in TERMINAL_EVENT_TYPES


@dataclass(frozen=True, slots=True)
class ChatMessage:
    username: str
    text: str
    channel: str = ""
    tags: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ChatSend:
    text: str
    # Explicit target; empty means the currently joined channel.
    channel: str = ""


@dataclass(frozen=True, slots=True)
class ChannelChange:
    # Empty leaves the current channel without joining another.
    channel: str


OutboundRequest = ChatSend | ChannelChange


@dataclass(frozen=True, slots=True)
class ConnectionInfo:
    token: str
    username: str
    channel: str
