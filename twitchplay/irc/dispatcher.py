"""Routing of classified inbound lines."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from ..errors.internal import SendError
from ..logs.logger import logger
from .codec import encode_control
from .models import ChatMessage, ConnectionEventType
from .parser import ChatLine, ControlLine, PingLine, parse_lines

if TYPE_CHECKING:  # pragma: no cover
    from .connection import ConnectionWorker


class IRCDispatcher:
    """Turns decoded lines into pongs, chat batches and server-message events."""

    def __init__(self, worker: ConnectionWorker) -> None:
        self.worker = worker

    def dispatch(self, lines: Iterable[str]) -> list[ChatMessage]:
        """Route ``lines`` in order and enqueue their chat messages as one batch."""
        batch: list[ChatMessage] = []
        for parsed in parse_lines(lines):
            if isinstance(parsed, PingLine):
                self._handle_ping()
            elif isinstance(parsed, ChatLine):
                batch.append(self._handle_privmsg(parsed))
            elif isinstance(parsed, ControlLine):
                self._handle_server_message(parsed)
        if batch:
            self.worker.mailbox.inbound.put(batch)
        return batch

    def _handle_ping(self) -> None:
        worker = self.worker
        try:
            worker.active_transport().send_line(encode_control("PONG"))
        except SendError as e:
            worker.emit(ConnectionEventType.ERROR, f"Failed to answer PING: {e}")
            return
        logger.log_event("irc", "pong_sent", level=logging.DEBUG, user=worker.username)

    def _handle_privmsg(self, parsed: ChatLine) -> ChatMessage:
        worker = self.worker
        is_own = parsed.sender.lower() == worker.username
        logger.log_event(
            "irc",
            "privmsg",
            level=logging.INFO if is_own else logging.DEBUG,
            user=worker.username,
            human=f"{parsed.sender}: {parsed.text}",
            channel=parsed.channel,
            author=parsed.sender,
            self_message=is_own,
        )
        return ChatMessage(
            username=parsed.sender,
            text=parsed.text,
            channel=parsed.channel,
            tags=dict(parsed.tags),
        )

    def _handle_server_message(self, parsed: ControlLine) -> None:
        logger.log_event(
            "irc", "raw", level=logging.DEBUG, user=self.worker.username, raw=parsed.raw
        )
        self.worker.emit(ConnectionEventType.MESSAGE, parsed.raw)
