"""Poll-based chat client for host applications.

Typical use from a frame/tick loop::

    client = TwitchChatClient()
    client.on_message(lambda msg: print(msg.username, msg.text))
    client.connect(ConnectionConfig(auth_token=token, username="mybot", channel="mychannel"))
    while running:
        client.poll()
        ...
    client.disconnect()

All public methods are meant to be called from one consumer thread. Callbacks
run synchronously inside :meth:`TwitchChatClient.poll`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from .config.model import ConnectionConfig, normalize_channel
from .constants import IRC_WORKER_JOIN_TIMEOUT
from .irc.connection import ConnectionWorker, TransportFactory, default_transport_factory
from .irc.mailbox import Mailbox
from .irc.models import (
    ChannelChange,
    ChatMessage,
    ChatSend,
    ConnectionEvent,
    ConnectionEventType,
    ConnectionInfo,
)
from .logs.logger import logger

ALREADY_ACTIVE_MESSAGE = "Already connected / connecting / pending!"
INVALID_PARAMETERS_MESSAGE = "Invalid connection parameters. Check your strings."

EventCallback = Callable[[ConnectionEvent], object]
MessageCallback = Callable[[ChatMessage], object]


@dataclass(slots=True)
class PollResult:
    events: list[ConnectionEvent] = field(default_factory=list)
    messages: list[ChatMessage] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.events or self.messages)


class TwitchChatClient:
    """Owns at most one connection worker and its mailbox at a time."""

    def __init__(
        self,
        *,
        transport_factory: TransportFactory = default_transport_factory,
        worker_join_timeout: float = IRC_WORKER_JOIN_TIMEOUT,
    ) -> None:
        self._transport_factory = transport_factory
        self._worker_join_timeout = worker_join_timeout
        self._worker: ConnectionWorker | None = None
        self._mailbox: Mailbox | None = None
        self._config: ConnectionConfig | None = None
        self._channel = ""
        # Events produced outside a live mailbox, delivered on the next poll.
        self._backlog: list[ConnectionEvent] = []
        self._pending_messages: list[ChatMessage] = []
        self._event_callbacks: list[EventCallback] = []
        self._message_callbacks: list[MessageCallback] = []

    # ------------------------------ callbacks ------------------------------- #
    def on_connection_event(self, callback: EventCallback) -> EventCallback:
        self._event_callbacks.append(callback)
        return callback

    def on_message(self, callback: MessageCallback) -> MessageCallback:
        self._message_callbacks.append(callback)
        return callback

    def remove_callback(self, callback: Callable[..., object]) -> None:
        for registry in (self._event_callbacks, self._message_callbacks):
            if callback in registry:
                registry.remove(callback)

    # ------------------------------ lifecycle ------------------------------- #
    def connect(self, config: ConnectionConfig) -> bool:
        """Start a connection worker.

        Returns False without spawning anything when a worker already exists or
        the credentials are empty; the reason arrives as an ERROR event on the
        next :meth:`poll`.
        """
        if self._worker is not None:
            self._reject(ALREADY_ACTIVE_MESSAGE, config)
            return False
        if not config.has_credentials:
            self._reject(INVALID_PARAMETERS_MESSAGE, config)
            return False

        self._config = config
        self._channel = ""
        self._mailbox = Mailbox()
        self._worker = ConnectionWorker(
            config, self._mailbox, transport_factory=self._transport_factory
        )
        self._worker.start()
        logger.log_event(
            "client", "connect_requested", user=config.username, channel=config.channel
        )
        return True

    def _reject(self, reason: str, config: ConnectionConfig) -> None:
        logger.log_event(
            "client", "connect_rejected", level=logging.WARNING, user=config.username, reason=reason
        )
        self._backlog.append(ConnectionEvent(ConnectionEventType.ERROR, reason, self._channel))

    def disconnect(self, graceful: bool = True) -> None:
        """Stop the current worker; safe to call repeatedly.

        A graceful stop waits for the worker to leave its channel, publish its
        DISCONNECTED event and close the socket; that event is delivered by the
        next :meth:`poll`. An immediate stop only signals the worker, which is
        reaped by :meth:`poll` once its terminal event arrives.
        """
        worker = self._worker
        if worker is None or (worker.stop_requested.is_set() and not graceful):
            return
        worker.request_stop()
        logger.log_event("client", "disconnect_requested", user=worker.username, graceful=graceful)
        if not graceful:
            return
        if not worker.join(self._worker_join_timeout):
            logger.log_event(
                "client",
                "worker_join_timeout",
                level=logging.WARNING,
                user=worker.username,
                timeout=self._worker_join_timeout,
            )
            return
        self._collect_mailbox()
        self._release_worker()

    def close(self) -> None:
        """Stop and reap the worker without keeping its final events."""
        worker = self._worker
        if worker is None:
            return
        worker.request_stop()
        worker.join(self._worker_join_timeout)
        self._release_worker()

    def __enter__(self) -> TwitchChatClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.disconnect(graceful=True)

    def _collect_mailbox(self) -> None:
        if self._mailbox is None:
            return
        self._backlog.extend(self._mailbox.status.drain())
        self._pending_messages.extend(self._mailbox.drain_messages())

    def _release_worker(self) -> None:
        self._worker = None
        self._mailbox = None
        self._channel = ""

    # ------------------------------- sending -------------------------------- #
    def _enqueue(self, request: ChatSend | ChannelChange) -> bool:
        worker = self._worker
        if worker is None or worker.stop_requested.is_set() or self._mailbox is None:
            return False
        self._mailbox.outbound.put(request)
        return True

    def send_chat(self, text: str, channel: str = "") -> bool:
        """Queue a chat line for ``channel`` or, when empty, the joined channel.

        True only means the request reached the worker; failures (for example no
        channel to send to) come back as ERROR events.
        """
        return self._enqueue(ChatSend(text, normalize_channel(channel)))

    def send_whisper(self, user: str, text: str, channel: str = "") -> bool:
        """Whisper ``user`` using the chat ``/w`` command over a channel."""
        user = user.strip().lstrip("@").lower()
        if not user:
            return False
        return self.send_chat(f"/w {user} {text}", channel)

    def join_channel(self, channel: str) -> bool:
        """Leave the current channel (if any) and join ``channel``.

        An empty name only leaves.
        """
        return self._enqueue(ChannelChange(normalize_channel(channel)))

    # ------------------------------- queries -------------------------------- #
    def is_connected(self) -> bool:
        worker = self._worker
        return worker is not None and worker.connected.is_set() and not worker.stop_requested.is_set()

    def is_pending_connection(self) -> bool:
        worker = self._worker
        return worker is not None and not worker.connected.is_set() and not worker.terminated

    def get_connection_info(self) -> ConnectionInfo | None:
        """Token, username and joined channel, or None when not connected."""
        if not self.is_connected() or self._config is None:
            return None
        return ConnectionInfo(self._config.auth_token, self._config.username, self._channel)

    # -------------------------------- polling -------------------------------- #
    def poll(self) -> PollResult:
        """Drain pending events and chat messages and run the callbacks."""
        result = PollResult(events=self._backlog, messages=self._pending_messages)
        self._backlog = []
        self._pending_messages = []

        terminal = False
        mailbox = self._mailbox
        if mailbox is not None:
            for event in mailbox.status.drain():
                result.events.append(event)
                terminal = terminal or event.is_terminal
            result.messages.extend(mailbox.drain_messages())

        for event in result.events:
            self._track_channel(event)
            self._emit_event(event)
        for message in result.messages:
            self._emit_message(message)

        if terminal and self._worker is not None:
            # The worker publishes its terminal event as its last act.
            self._worker.join(self._worker_join_timeout)
            self._release_worker()
        return result

    def _track_channel(self, event: ConnectionEvent) -> None:
        self._channel = event.channel

    def _emit_event(self, event: ConnectionEvent) -> None:
        for callback in list(self._event_callbacks):
            try:
                callback(event)
            except Exception as e:  # noqa: BLE001
                logger.log_event(
                    "client",
                    "callback_error",
                    level=logging.ERROR,
                    error=str(e),
                    error_type=type(e).__name__,
                )

    def _emit_message(self, message: ChatMessage) -> None:
        for callback in list(self._message_callbacks):
            try:
                callback(message)
            except Exception as e:  # noqa: BLE001
                logger.log_event(
                    "client",
                    "callback_error",
                    level=logging.ERROR,
                    error=str(e),
                    error_type=type(e).__name__,
                )
