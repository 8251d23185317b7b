"""Build a :class:`ConnectionConfig` from the process environment."""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import ValidationError

from ..errors.internal import InvalidParametersError
from .model import ConnectionConfig

ENV_TOKEN = "TWITCH_OAUTH_TOKEN"
ENV_USERNAME = "TWITCH_USERNAME"
ENV_CHANNEL = "TWITCH_CHANNEL"
ENV_AUTH_TIMEOUT = "TWITCH_AUTH_TIMEOUT"


def load_config_from_env(environ: Mapping[str, str] | None = None) -> ConnectionConfig:
    """Read credentials and channel from environment variables.

    Raises:
        InvalidParametersError: if credentials are missing or a value does
            not validate.
    """
    env = os.environ if environ is None else environ
    values: dict[str, object] = {
        "auth_token": env.get(ENV_TOKEN, ""),
        "username": env.get(ENV_USERNAME, ""),
        "channel": env.get(ENV_CHANNEL, ""),
    }
    if env.get(ENV_AUTH_TIMEOUT):
        values["auth_timeout"] = env[ENV_AUTH_TIMEOUT]
    try:
        config = ConnectionConfig(**values)
    except ValidationError as e:
        raise InvalidParametersError(
            f"Invalid connection configuration: {e.error_count()} error(s)",
            data={"errors": e.errors(include_url=False)},
        ) from e
    if not config.has_credentials:
        raise InvalidParametersError(
            f"Set {ENV_TOKEN} and {ENV_USERNAME} to connect",
            data={"username": config.username},
        )
    return config
