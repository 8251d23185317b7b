"""TwitchPlay: poll-based Twitch IRC chat client."""

from .client import PollResult, TwitchChatClient  # noqa: F401
from .commands import ChatCommandRouter  # noqa: F401
from .config import ConnectionConfig, load_config_from_env  # noqa: F401
from .irc.models import (  # noqa: F401
    ChatMessage,
    ConnectionEvent,
    ConnectionEventType,
    ConnectionInfo,
    ConnectionState,
)

__version__ = "1.0.0"

__all__ = [
    "ChatCommandRouter",
    "ChatMessage",
    "ConnectionConfig",
    "ConnectionEvent",
    "ConnectionEventType",
    "ConnectionInfo",
    "ConnectionState",
    "PollResult",
    "TwitchChatClient",
    "load_config_from_env",
]
