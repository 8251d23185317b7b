"""Event logger used across the chat client.

Events are addressed as ``(domain, action)`` and rendered through the template
catalog. ``user`` and ``channel`` keywords are reserved: they form the
``[user#channel]`` column instead of appearing in the context suffix.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

EVENT_COLUMN_WIDTH = 32
PREFIX_WIDTH = 24
CHAT_BUBBLE = "💬"
# Events rendered as chat lines: "💬 #channel username: message"
CHAT_EVENTS = frozenset({"irc_privmsg"})


def debug_enabled() -> bool:
    return os.environ.get("DEBUG", "false").lower() in ("true", "1", "yes")


def render_template(domain: str, action: str, fields: dict[str, object]) -> tuple[str, bool]:
    """Return ``(text, derived)`` for an event.

    A template whose placeholders are not all supplied is returned unformatted.
    Unknown events get a text derived from their names.
    """
    # Looked up per call so reload_event_templates() takes effect.
    from .event_catalog import EVENT_TEMPLATES

    template = EVENT_TEMPLATES.get((domain, action))
    if template is None:
        return f"{domain.replace('_', ' ')}: {action.replace('_', ' ')}", True
    try:
        return template.format(**fields), False
    except (KeyError, IndexError, ValueError):
        return template, False


@dataclass(slots=True)
class LogLine:
    event: str
    text: str | None
    user: str | None = None
    channel: str | None = None
    context: dict[str, object] = field(default_factory=dict)

    @property
    def prefix(self) -> str:
        label = self.user or "system"
        if self.channel:
            label = f"{label}#{self.channel}"
        return f"[{label[:PREFIX_WIDTH]:<{PREFIX_WIDTH}}]"

    def display_text(self) -> str | None:
        if self.event not in CHAT_EVENTS or not self.text:
            return self.text
        body = self.text.removeprefix(CHAT_BUBBLE).lstrip()
        where = f" #{self.channel}" if self.channel else ""
        return f"{CHAT_BUBBLE}{where} {body}"

    def concise(self) -> str:
        return f"{self.prefix} {self.display_text() or self.event}"

    def verbose(self) -> str:
        name = self.event
        if len(name) > EVENT_COLUMN_WIDTH:
            name = name[: EVENT_COLUMN_WIDTH - 1] + "…"
        parts = [name.ljust(EVENT_COLUMN_WIDTH), self.prefix]
        text = self.display_text()
        if text:
            parts.append(text)
        if self.context:
            parts.append("(" + ", ".join(f"{k}={v}" for k, v in self.context.items()) + ")")
        return " ".join(parts)


def _label(value: object) -> str | None:
    return value if isinstance(value, str) and value else None


class ChatLogger:
    """Structured event logger.

    Console output is left to the host application (see
    ``logging_config.LoggerConfigurator``); records propagate to the root
    logger.
    """

    def __init__(self, name: str = "twitchplay") -> None:
        self.logger = logging.getLogger(name)
        self.logger.handlers.clear()
        self.logger.addHandler(logging.NullHandler())
        self.logger.setLevel(logging.DEBUG if debug_enabled() else logging.INFO)

    def set_level(self, level: int) -> None:
        self.logger.setLevel(level)

    def log_event(
        self,
        domain: str,
        action: str,
        level: int = logging.INFO,
        human: str | None = None,
        *,
        exc_info: bool = False,
        **kwargs: object,
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        user = _label(kwargs.pop("user", None))
        channel = _label(kwargs.pop("channel", None))
        if human is None:
            fields = {"user": user or "", "channel": channel or "", **kwargs}
            human, derived = render_template(domain, action, fields)
            if derived:
                kwargs["derived"] = True
        line = LogLine(f"{domain}_{action}".lower(), human, user, channel, kwargs)
        msg = line.verbose() if debug_enabled() else line.concise()
        self.logger.log(level, msg, exc_info=exc_info)


logger = ChatLogger()
