"""IRC subsystem package.

Contains framing, parsing, transport, dispatch, mailbox and the connection
worker for Twitch IRC.
"""

from .codec import LineBuffer, decode_frame, encode_chat, encode_control, to_wire  # noqa: F401
from .connection import ConnectionWorker  # noqa: F401
from .mailbox import Mailbox, SpscQueue  # noqa: F401
from .models import (  # noqa: F401
    ChannelChange,
    ChatMessage,
    ChatSend,
    ConnectionEvent,
    ConnectionEventType,
    ConnectionInfo,
    ConnectionState,
)
from .parser import ChatLine, ControlLine, PingLine, parse_frame, parse_line  # noqa: F401
from .transport import SocketTransport  # noqa: F401

__all__ = [
    "ChannelChange",
    "ChatLine",
    "ChatMessage",
    "ChatSend",
    "ConnectionEvent",
    "ConnectionEventType",
    "ConnectionInfo",
    "ConnectionState",
    "ConnectionWorker",
    "ControlLine",
    "LineBuffer",
    "Mailbox",
    "PingLine",
    "SocketTransport",
    "SpscQueue",
    "decode_frame",
    "encode_chat",
    "encode_control",
    "parse_frame",
    "parse_line",
    "to_wire",
]
