"""Line framing and outbound line formatting for Twitch IRC."""

from __future__ import annotations

import re

from ..constants import PONG_LINE

WIRE_ENCODING = "utf-8"
LINE_TERMINATOR = "\r\n"

_LINE_SPLIT = re.compile(r"\r\n|\r|\n")
# Byte-level terminators, so multi-byte characters are never split mid-line.
_PARTIAL_SPLIT = re.compile(rb"\r\n|\r|\n")
# Runs of line breaks inside outbound text collapse to one space.
_EMBEDDED_BREAKS = re.compile(r"[\r\n]+")

_CONTROL_FORMATS = {
    "PASS": "PASS {}",
    "NICK": "NICK {}",
    "JOIN": "JOIN #{}",
    "PART": "PART #{}",
}


def _decode(raw: bytes) -> str:
    return raw.decode(WIRE_ENCODING, errors="replace")


def decode_frame(raw: bytes) -> list[str]:
    """Split one received chunk into its non-empty lines, in order."""
    return [line for line in _LINE_SPLIT.split(_decode(raw)) if line]


class LineBuffer:
    """Reassembles lines that arrive split across several reads.

    Complete lines are returned from ``feed``; an unterminated tail is kept
    until the next chunk supplies its terminator.
    """

    def __init__(self) -> None:
        self._partial = b""

    @property
    def pending(self) -> bytes:
        return self._partial

    def feed(self, raw: bytes) -> list[str]:
        if not raw:
            return []
        data = self._partial + raw
        pieces = _PARTIAL_SPLIT.split(data)
        # A CRLF split across two reads leaves an empty first piece, dropped below.
        self._partial = pieces.pop()
        return [line for line in (_decode(p) for p in pieces) if line]

    def flush(self) -> list[str]:
        tail, self._partial = self._partial, b""
        return decode_frame(tail)

    def clear(self) -> None:
        self._partial = b""


def encode_chat(message: str, channel: str = "") -> str:
    """Address a chat line to ``channel``; unaddressed messages pass through raw.

    Line breaks in ``message`` are folded into spaces so one call always
    produces exactly one wire line.
    """
    message = _EMBEDDED_BREAKS.sub(" ", message)
    if channel:
        return f"PRIVMSG #{channel} :{message}"
    return message


def encode_control(verb: str, *args: str) -> str:
    verb = verb.upper()
    if verb == "PONG":
        return PONG_LINE
    template = _CONTROL_FORMATS.get(verb)
    if template is None:
        raise ValueError(f"unsupported control verb: {verb}")
    if len(args) != 1:
        raise ValueError(f"{verb} takes exactly one argument")
    return template.format(args[0])


def to_wire(line: str) -> bytes:
    return f"{line}{LINE_TERMINATOR}".encode(WIRE_ENCODING)
