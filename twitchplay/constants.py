"""
Configuration constants for the TwitchPlay chat client

Every tunable below can be overridden by setting an environment variable with
the same name. Protocol strings are fixed.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Read an integer override, falling back to ``default`` when unset or invalid."""
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(f"Warning: Invalid integer value for {name}='{value}', using default {default}")
    return default


def _get_env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            print(f"Warning: Invalid float value for {name}='{value}', using default {default}")
    return default


# Twitch IRC endpoint (plain TCP, standard IRC port)
TWITCH_IRC_HOST = os.getenv("TWITCH_IRC_HOST", "irc.twitch.tv")
TWITCH_IRC_PORT = _get_env_int("TWITCH_IRC_PORT", 6667)

# Wire protocol markers
TWITCH_SERVER_NAME = "tmi.twitch.tv"
PING_LINE = f"PING :{TWITCH_SERVER_NAME}"
PONG_LINE = f"PONG :{TWITCH_SERVER_NAME}"
WELCOME_PREFIX = f":{TWITCH_SERVER_NAME} 001"
WELCOME_MARKER = ":Welcome, GLHF!"
OAUTH_PREFIX = "oauth:"

# Worker loop timing
IRC_IDLE_SLEEP = _get_env_float(
    "IRC_IDLE_SLEEP", 0.1
)  # Seconds slept between polls when no data is pending
IRC_RECV_BUFFER_SIZE = _get_env_int(
    "IRC_RECV_BUFFER_SIZE", 4096
)  # Bytes read per recv call
IRC_SOCKET_RCVBUF = _get_env_int(
    "IRC_SOCKET_RCVBUF", 2 * 1024 * 1024
)  # Kernel receive buffer requested for the chat socket
IRC_CONNECT_TIMEOUT = _get_env_float(
    "IRC_CONNECT_TIMEOUT", 10.0
)  # Seconds allowed for the TCP connect and each blocking send
IRC_CONNECT_ATTEMPTS = _get_env_int(
    "IRC_CONNECT_ATTEMPTS", 1
)  # Resolve/connect attempts before FAILED_TO_CONNECT
IRC_CONNECT_RETRY_MAX_WAIT = _get_env_float(
    "IRC_CONNECT_RETRY_MAX_WAIT", 8.0
)  # Ceiling for the exponential wait between connect attempts
IRC_WORKER_JOIN_TIMEOUT = _get_env_float(
    "IRC_WORKER_JOIN_TIMEOUT", 15.0
)  # Seconds a graceful disconnect waits for the worker thread

# Chat throttling (0 disables the limiter)
CHAT_MIN_SEND_INTERVAL = _get_env_float("CHAT_MIN_SEND_INTERVAL", 0.0)

# Command routing defaults
COMMAND_DELIMITER = os.getenv("COMMAND_DELIMITER", "!")
OPTIONS_DELIMITER = os.getenv("OPTIONS_DELIMITER", "?")
