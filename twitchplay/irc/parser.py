"""IRC line classification.

Every decoded line becomes exactly one of :class:`PingLine`,
:class:`ChatLine` or :class:`ControlLine`. Lines that cannot be read as chat
are never dropped; they surface as control lines so the consumer still sees
what the server said.

Chat form handled::

    [@tags ]:nick!nick@nick.tmi.twitch.tv PRIVMSG #channel :message text
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from ..constants import PING_LINE, WELCOME_MARKER, WELCOME_PREFIX
from .codec import decode_frame

CHAT_VERB = "PRIVMSG"


@dataclass(frozen=True, slots=True)
class PingLine:
    raw: str = PING_LINE


@dataclass(frozen=True, slots=True)
class ChatLine:
    sender: str
    text: str
    channel: str = ""
    tags: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ControlLine:
    raw: str


ParsedLine = PingLine | ChatLine | ControlLine


def _parse_tags(raw_tags: str) -> dict[str, str]:
    tags: dict[str, str] = {}
    for tag in raw_tags.split(";"):
        if not tag:
            continue
        if "=" in tag:
            k, v = tag.split("=", 1)
        else:
            k, v = tag, ""
        tags[k] = v
    return tags


def strip_tags(line: str) -> tuple[dict[str, str], str]:
    """Split a leading IRCv3 tag block off ``line``."""
    if not line.startswith("@"):
        return {}, line
    tags_part, sep, rest = line.partition(" ")
    if not sep:
        return {}, line
    return _parse_tags(tags_part[1:]), rest.lstrip(" ")


def parse_line(line: str) -> ParsedLine:
    if line == PING_LINE:
        return PingLine()

    tags, body = strip_tags(line)
    # Content may itself contain ':'; only the first one after the prefix splits.
    meta, sep, content = body.removeprefix(":").partition(":")
    tokens = meta.split()
    if len(tokens) < 2 or not sep or not content:
        return ControlLine(line)

    sender = ""
    if tokens[1] == CHAT_VERB and "!" in tokens[0]:
        sender = tokens[0].split("!", 1)[0]
    if not sender:
        return ControlLine(line)

    channel = tokens[2].lstrip("#").lower() if len(tokens) > 2 else ""
    return ChatLine(sender=sender, text=content, channel=channel, tags=tags)


def parse_lines(lines: Iterable[str]) -> list[ParsedLine]:
    return [parse_line(line) for line in lines]


def parse_frame(raw: bytes) -> list[ParsedLine]:
    return parse_lines(decode_frame(raw))


def is_welcome(line: str) -> bool:
    """True for the server's successful-authentication line."""
    return line.startswith(WELCOME_PREFIX) and WELCOME_MARKER in line
