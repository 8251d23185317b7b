from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import (
    CHAT_MIN_SEND_INTERVAL,
    IRC_CONNECT_ATTEMPTS,
    IRC_IDLE_SLEEP,
    OAUTH_PREFIX,
    TWITCH_IRC_HOST,
    TWITCH_IRC_PORT,
)


def normalize_channel(channel: str | None) -> str:
    """Lower-case a channel name and drop a leading '#'."""
    return (channel or "").strip().lstrip("#").lower()


class ConnectionConfig(BaseModel):
    """Settings for one connection attempt.

    Frozen so the worker can hold a reference without copying: the facade and
    the worker thread both read it, nobody writes it.

    Attributes:
        auth_token: OAuth token, stored with the ``oauth:`` prefix.
        username: Login name, lower-cased.
        channel: Channel joined after authentication; empty joins nothing.
        min_send_interval: Minimum seconds between two chat lines.
        auth_timeout: Seconds to wait for the welcome line; None waits forever.
        idle_sleep: Seconds the worker sleeps when no data is pending.
        connect_attempts: Resolve/connect attempts before giving up.
        host: Chat server host name.
        port: Chat server TCP port.
    """

    model_config = ConfigDict(frozen=True)

    auth_token: str = ""
    username: str = ""
    channel: str = ""
    min_send_interval: float = Field(default=CHAT_MIN_SEND_INTERVAL, ge=0)
    auth_timeout: float | None = Field(default=None, gt=0)
    idle_sleep: float = Field(default=IRC_IDLE_SLEEP, ge=0)
    connect_attempts: int = Field(default=IRC_CONNECT_ATTEMPTS, ge=1)
    host: str = TWITCH_IRC_HOST
    port: int = Field(default=TWITCH_IRC_PORT, gt=0, lt=65536)

    @field_validator("auth_token", mode="before")
    @classmethod
    def validate_token(cls, v: object) -> str:
        token = str(v or "").strip()
        if token and not token.startswith(OAUTH_PREFIX):
            token = f"{OAUTH_PREFIX}{token}"
        return token

    @field_validator("username", mode="before")
    @classmethod
    def validate_username(cls, v: object) -> str:
        return str(v or "").strip().lower()

    @field_validator("channel", mode="before")
    @classmethod
    def validate_channel(cls, v: object) -> str:
        return normalize_channel(str(v or ""))

    @property
    def has_credentials(self) -> bool:
        return bool(self.auth_token and self.username)
