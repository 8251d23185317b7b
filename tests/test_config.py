"""
Tests for connection configuration and environment loading
"""

import pytest
from pydantic import ValidationError

from twitchplay.config import ConnectionConfig, load_config_from_env, normalize_channel
from twitchplay.constants import TWITCH_IRC_HOST, TWITCH_IRC_PORT
from twitchplay.errors import InvalidParametersError


class TestConnectionConfig:
    def test_token_gets_oauth_prefix(self):
        assert ConnectionConfig(auth_token="abc").auth_token == "oauth:abc"
        assert ConnectionConfig(auth_token="oauth:abc").auth_token == "oauth:abc"
        assert ConnectionConfig(auth_token="  ").auth_token == ""

    def test_username_and_channel_normalized(self):
        cfg = ConnectionConfig(auth_token="t", username=" MyBot ", channel="#SomeChannel")
        assert cfg.username == "mybot"
        assert cfg.channel == "somechannel"

    def test_defaults(self):
        cfg = ConnectionConfig()
        assert cfg.host == TWITCH_IRC_HOST
        assert cfg.port == TWITCH_IRC_PORT
        assert cfg.auth_timeout is None
        assert cfg.connect_attempts >= 1
        assert not cfg.has_credentials

    def test_has_credentials(self):
        assert ConnectionConfig(auth_token="t", username="u").has_credentials
        assert not ConnectionConfig(auth_token="t").has_credentials

    def test_frozen(self):
        cfg = ConnectionConfig(auth_token="t", username="u")
        with pytest.raises(ValidationError):
            cfg.username = "other"

    @pytest.mark.parametrize(
        "field, value",
        [
            ("min_send_interval", -1),
            ("auth_timeout", 0),
            ("idle_sleep", -0.1),
            ("connect_attempts", 0),
            ("port", 70000),
        ],
    )
    def test_invalid_values_rejected(self, field, value):
        with pytest.raises(ValidationError):
            ConnectionConfig(**{field: value})


def test_normalize_channel():
    assert normalize_channel("#Foo ") == "foo"
    assert normalize_channel(None) == ""
    assert normalize_channel("") == ""


class TestLoadConfigFromEnv:
    def test_loads_values(self):
        cfg = load_config_from_env(
            {
                "TWITCH_OAUTH_TOKEN": "secret",
                "TWITCH_USERNAME": "Bot",
                "TWITCH_CHANNEL": "#Chan",
                "TWITCH_AUTH_TIMEOUT": "5",
            }
        )
        assert cfg.auth_token == "oauth:secret"
        assert cfg.username == "bot"
        assert cfg.channel == "chan"
        assert cfg.auth_timeout == 5.0

    def test_missing_credentials(self):
        with pytest.raises(InvalidParametersError) as exc:
            load_config_from_env({"TWITCH_USERNAME": "bot"})
        assert "TWITCH_OAUTH_TOKEN" in str(exc.value)

    def test_invalid_value_wrapped(self):
        with pytest.raises(InvalidParametersError) as exc:
            load_config_from_env(
                {"TWITCH_OAUTH_TOKEN": "t", "TWITCH_USERNAME": "u", "TWITCH_AUTH_TIMEOUT": "soon"}
            )
        assert exc.value.data["errors"]
        assert isinstance(exc.value.__cause__, ValidationError)

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("TWITCH_OAUTH_TOKEN", "tok")
        monkeypatch.setenv("TWITCH_USERNAME", "envbot")
        monkeypatch.delenv("TWITCH_CHANNEL", raising=False)
        monkeypatch.delenv("TWITCH_AUTH_TIMEOUT", raising=False)
        cfg = load_config_from_env()
        assert cfg.username == "envbot"
        assert cfg.channel == ""
