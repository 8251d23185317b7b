"""Event logging for the chat client (template catalog + ChatLogger)."""

from . import event_catalog  # noqa: F401
from .event_catalog import missing_templates, reload_event_templates  # noqa: F401
from .logger import ChatLogger, logger  # noqa: F401

__all__ = ["ChatLogger", "event_catalog", "logger", "missing_templates", "reload_event_templates"]
