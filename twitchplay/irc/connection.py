"""Connection worker: socket ownership and the connection state machine.

One :class:`ConnectionWorker` drives one connection attempt from start to a
single terminal event::

    DISCONNECTED -> CONNECTING -> AUTHENTICATING -> [JOINING] -> CONNECTED
                        |               |               |           |
                        +---------------+---------------+-----------+--> FAILED /
                                                                        DISCONNECTED /
                                                                        DISCONNECTED_BY_REQUEST

Everything the consumer learns goes through the mailbox. The only other state
shared with the consumer thread is the pair of ``threading.Event`` flags.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from collections.abc import Callable
from typing import Protocol

from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    stop_when_event_set,
    wait_exponential,
)

from ..config.model import ConnectionConfig, normalize_channel
from ..constants import IRC_CONNECT_RETRY_MAX_WAIT
from ..errors.handling import log_error
from ..errors.internal import (
    AuthRejectedError,
    AuthSendError,
    AuthTimeoutError,
    ConnectionLostError,
    InternalError,
    JoinError,
    NetworkError,
    SendError,
)
from ..logs.logger import logger
from ..rate.rate_limiter import ChatRateLimiter
from .codec import LineBuffer, encode_chat, encode_control
from .dispatcher import IRCDispatcher
from .mailbox import Mailbox
from .models import (
    ChannelChange,
    ChatSend,
    ConnectionEvent,
    ConnectionEventType,
    ConnectionState,
)
from .parser import is_welcome
from .transport import SocketTransport

NO_CHANNEL_MESSAGE = "Cannot send message. No channel specified, and not joined to a channel."
LOST_CONNECTION_MESSAGE = "Lost connection to server"
GRACEFUL_DISCONNECT_MESSAGE = "Disconnected by request gracefully"
REQUESTED_DISCONNECT_MESSAGE = "Disconnected by request"


class Transport(Protocol):
    @property
    def connected(self) -> bool: ...

    def open(self) -> None: ...

    def send_line(self, line: str) -> None: ...

    def receive(self) -> bytes: ...

    def close(self) -> None: ...


TransportFactory = Callable[[ConnectionConfig], Transport]


def default_transport_factory(config: ConnectionConfig) -> Transport:
    return SocketTransport(config.host, config.port, username=config.username)


class ConnectionWorker:  # pylint: disable=too-many-instance-attributes
    """Runs one connection on a dedicated thread.

    ``run()`` may also be called directly on the current thread, which is how
    the tests drive it with a scripted transport.
    """

    def __init__(
        self,
        config: ConnectionConfig,
        mailbox: Mailbox | None = None,
        *,
        transport_factory: TransportFactory = default_transport_factory,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config
        self.mailbox = mailbox or Mailbox()
        self.username = config.username
        self.state = ConnectionState.DISCONNECTED
        self.transport: Transport | None = None
        # Joined channel; read and written on the worker thread only.
        self.channel = ""
        self.stop_requested = threading.Event()
        self.connected = threading.Event()
        self.rate_limiter = ChatRateLimiter(
            config.min_send_interval, clock=clock, username=config.username
        )
        self.dispatcher = IRCDispatcher(self)
        self._transport_factory = transport_factory
        self._sleep = sleep
        self._clock = clock
        self._lines = LineBuffer()
        # Requests taken off the outbound queue but not yet handled, in order.
        self._backlog: deque[ChatSend | ChannelChange] = deque()
        self._terminated = False
        self._thread: threading.Thread | None = None

    # ----------------------------- thread control ----------------------------- #
    def start(self) -> threading.Thread:
        if self._thread is not None:
            raise RuntimeError("ConnectionWorker.start called more than once")
        self._thread = threading.Thread(
            target=self.run, name=f"twitchplay-irc-{self.username}", daemon=True
        )
        self._thread.start()
        return self._thread

    def request_stop(self) -> None:
        self.stop_requested.set()

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the worker thread; True once it has exited."""
        if self._thread is None:
            return True
        if self._thread is not threading.current_thread():
            self._thread.join(timeout)
        return not self._thread.is_alive()

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def terminated(self) -> bool:
        return self._terminated

    def active_transport(self) -> Transport:
        if self.transport is None:
            raise ConnectionLostError("No transport has been opened for this connection")
        return self.transport

    # -------------------------------- events -------------------------------- #
    def _set_state(self, new_state: ConnectionState) -> None:
        if self.state != new_state:
            logger.log_event(
                "irc",
                "state_change",
                level=logging.DEBUG,
                user=self.username,
                old_state=self.state.name,
                new_state=new_state.name,
            )
            self.state = new_state

    def emit(self, event_type: ConnectionEventType, message: str = "") -> ConnectionEvent:
        event = ConnectionEvent(event_type, message, self.channel)
        self.mailbox.status.put(event)
        if event_type is ConnectionEventType.ERROR:
            logger.log_event(
                "irc", "error_event", level=logging.WARNING, user=self.username, error=message
            )
        return event

    def _finish(
        self,
        event_type: ConnectionEventType,
        message: str,
        state: ConnectionState,
    ) -> None:
        """Publish the single terminal event of this run."""
        if self._terminated:
            return
        self._terminated = True
        self.connected.clear()
        self.emit(event_type, message)
        self._set_state(state)

    def _fail(self, event_type: ConnectionEventType, error: InternalError) -> None:
        log_error("Connection attempt failed", error, context={"user": self.username})
        self._finish(event_type, str(error), ConnectionState.FAILED)

    # --------------------------------- run ---------------------------------- #
    def run(self) -> None:
        try:
            if self._connect() and self._authenticate():
                self._pump()
        except Exception as e:  # noqa: BLE001
            log_error("Connection worker crashed", e, context={"user": self.username})
            self._finish(
                ConnectionEventType.DISCONNECTED,
                f"Connection worker error: {e}",
                ConnectionState.FAILED,
            )
        finally:
            self._release()

    def _release(self) -> None:
        self.connected.clear()
        if self.rate_limiter.pending:
            logger.log_event(
                "rate",
                "discarded",
                level=logging.WARNING,
                user=self.username,
                pending=self.rate_limiter.pending,
            )
            self.rate_limiter.clear()
        self._backlog.clear()
        if self.transport is not None:
            self.transport.close()
        self._lines.clear()
        logger.log_event("irc", "worker_exit", level=logging.DEBUG, user=self.username)

    def _log_connect_retry(self, retry_state) -> None:  # type: ignore[no-untyped-def]
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        logger.log_event(
            "irc",
            "connect_retry",
            level=logging.WARNING,
            user=self.username,
            attempt=retry_state.attempt_number,
            max_attempts=self.config.connect_attempts,
            error=str(exc),
        )

    def _open_transport(self, transport: Transport) -> None:
        retrying = Retrying(
            stop=stop_after_attempt(self.config.connect_attempts)
            | stop_when_event_set(self.stop_requested),
            wait=wait_exponential(multiplier=0.5, max=IRC_CONNECT_RETRY_MAX_WAIT),
            retry=retry_if_exception_type(NetworkError),
            before_sleep=self._log_connect_retry,
            sleep=self._sleep,
            reraise=True,
        )
        retrying(transport.open)

    def _connect(self) -> bool:
        self._set_state(ConnectionState.CONNECTING)
        logger.log_event(
            "irc",
            "connect_start",
            user=self.username,
            server=self.config.host,
            port=self.config.port,
        )
        transport = self._transport_factory(self.config)
        self.transport = transport
        try:
            self._open_transport(transport)
        except NetworkError as e:
            self._fail(ConnectionEventType.FAILED_TO_CONNECT, e)
            return False

        self._set_state(ConnectionState.AUTHENTICATING)
        try:
            transport.send_line(encode_control("PASS", self.config.auth_token))
            transport.send_line(encode_control("NICK", self.username))
        except SendError as e:
            error = AuthSendError("Could not send initial PASS and NICK messages for Auth")
            error.__cause__ = e
            self._fail(ConnectionEventType.FAILED_TO_CONNECT, error)
            return False
        logger.log_event("irc", "auth_sent", level=logging.DEBUG, user=self.username)
        return True

    def _authenticate(self) -> bool:
        transport = self.active_transport()
        started = self._clock()
        timeout = self.config.auth_timeout
        while True:
            if self.stop_requested.is_set():
                self._finish(
                    ConnectionEventType.DISCONNECTED,
                    REQUESTED_DISCONNECT_MESSAGE,
                    ConnectionState.DISCONNECTED_BY_REQUEST,
                )
                return False
            if not transport.connected:
                self._fail(
                    ConnectionEventType.FAILED_TO_CONNECT,
                    ConnectionLostError("Connection closed while waiting for authentication"),
                )
                return False

            lines = self._lines.feed(transport.receive())
            if lines:
                return self._complete_handshake(lines[0], lines[1:])

            if timeout is not None and self._clock() - started >= timeout:
                self._fail(
                    ConnectionEventType.FAILED_TO_AUTHENTICATE,
                    AuthTimeoutError(
                        "Timed out waiting for authentication reply",
                        data={"timeout": timeout},
                    ),
                )
                return False
            self._sleep(self.config.idle_sleep)

    def _complete_handshake(self, reply: str, remaining: list[str]) -> bool:
        if not is_welcome(reply):
            self._fail(ConnectionEventType.FAILED_TO_AUTHENTICATE, AuthRejectedError(reply))
            return False

        logger.log_event("irc", "authenticated", user=self.username)
        self.emit(ConnectionEventType.CONNECTED, reply)

        channel = self.config.channel
        if channel:
            self._set_state(ConnectionState.JOINING)
            try:
                self.active_transport().send_line(encode_control("JOIN", channel))
            except SendError as e:
                error = JoinError("Failed to join channel", data={"channel": channel})
                error.__cause__ = e
                self._fail(ConnectionEventType.FAILED_TO_AUTHENTICATE, error)
                return False
            self.channel = channel
            logger.log_event("irc", "join_sent", user=self.username, channel=channel)
            self.emit(ConnectionEventType.CHANNEL_CHANGED, channel)

        self._set_state(ConnectionState.CONNECTED)
        self.connected.set()
        logger.log_event("irc", "connect_success", user=self.username, channel=self.channel)
        self.dispatcher.dispatch(remaining)
        return True

    def _pump(self) -> None:
        transport = self.active_transport()
        while not self.stop_requested.is_set():
            if not transport.connected:
                self._finish(
                    ConnectionEventType.DISCONNECTED,
                    LOST_CONNECTION_MESSAGE,
                    ConnectionState.DISCONNECTED,
                )
                return
            self.run_cycle()
            self._sleep(self.config.idle_sleep)
        self._shutdown()

    def run_cycle(self) -> None:
        """One steady-state pass: receive, route, drain requests, release chat."""
        self.dispatcher.dispatch(self._lines.feed(self.active_transport().receive()))
        self._drain_outbound()
        self._flush_chat()

    def _shutdown(self) -> None:
        transport = self.transport
        if transport is None or not transport.connected:
            self._finish(
                ConnectionEventType.DISCONNECTED,
                LOST_CONNECTION_MESSAGE,
                ConnectionState.DISCONNECTED,
            )
            return
        if self.channel:
            self._send_control("PART", self.channel)
        self._finish(
            ConnectionEventType.DISCONNECTED,
            GRACEFUL_DISCONNECT_MESSAGE,
            ConnectionState.DISCONNECTED_BY_REQUEST,
        )

    # ------------------------------- outbound -------------------------------- #
    def _send_control(self, verb: str, *args: str) -> bool:
        try:
            self.active_transport().send_line(encode_control(verb, *args))
        except SendError as e:
            self.emit(ConnectionEventType.ERROR, f"Failed to send {verb}: {e}")
            return False
        return True

    def _drain_outbound(self) -> None:
        """Handle queued requests in the order they were made.

        A channel change first writes every chat line queued ahead of it. If
        the rate limiter still holds some, the change and everything behind it
        wait for a later cycle.
        """
        self._backlog.extend(self.mailbox.outbound.drain())
        while self._backlog:
            request = self._backlog[0]
            if isinstance(request, ChannelChange):
                self._flush_chat()
                if self.rate_limiter.pending:
                    return
                self._backlog.popleft()
                self._change_channel(request.channel)
            else:
                self._backlog.popleft()
                self._queue_chat(request)

    def _queue_chat(self, request: ChatSend) -> None:
        target = normalize_channel(request.channel) or self.channel
        if not target:
            self.emit(ConnectionEventType.ERROR, NO_CHANNEL_MESSAGE)
            return
        self.rate_limiter.submit(encode_chat(request.text, target))

    def _change_channel(self, new_channel: str) -> None:
        new_channel = normalize_channel(new_channel)
        if self.channel:
            self._send_control("PART", self.channel)
            logger.log_event("irc", "part_sent", user=self.username, channel=self.channel)
        self.channel = new_channel
        if new_channel:
            self._send_control("JOIN", new_channel)
            logger.log_event("irc", "join_sent", user=self.username, channel=new_channel)
        self.emit(ConnectionEventType.CHANNEL_CHANGED, new_channel)

    def _flush_chat(self) -> None:
        for line in self.rate_limiter.release():
            try:
                self.active_transport().send_line(line)
            except SendError as e:
                self.emit(ConnectionEventType.ERROR, f"Failed to send chat message: {e}")
