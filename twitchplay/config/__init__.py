"""Configuration package exports."""

from .loader import load_config_from_env  # noqa: F401
from .model import ConnectionConfig, normalize_channel  # noqa: F401

__all__ = ["ConnectionConfig", "load_config_from_env", "normalize_channel"]
