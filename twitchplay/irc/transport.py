"""Blocking-free TCP transport owned by the connection worker."""

from __future__ import annotations

import logging
import select
import socket

from ..constants import IRC_CONNECT_TIMEOUT, IRC_RECV_BUFFER_SIZE, IRC_SOCKET_RCVBUF
from ..errors.internal import (
    ConnectFailureError,
    HostResolutionError,
    SendError,
    SocketCreationError,
)
from ..logs.logger import logger
from .codec import to_wire


class SocketTransport:
    """Plain TCP socket to the chat server.

    Only the worker thread touches an instance. Receives never block: pending
    data is probed with a zero-timeout ``select`` before ``recv``. Sends use the
    connect timeout so a stalled peer cannot hang the worker forever.
    """

    def __init__(
        self,
        host: str,
        port: int,
        *,
        connect_timeout: float = IRC_CONNECT_TIMEOUT,
        recv_size: int = IRC_RECV_BUFFER_SIZE,
        username: str | None = None,
    ) -> None:
        self.host = host
        self.port = port
        self.connect_timeout = connect_timeout
        self.recv_size = recv_size
        self.username = username
        self.sock: socket.socket | None = None
        self._connected = False

    @property
    def connected(self) -> bool:
        return self._connected and self.sock is not None

    def _resolve(self) -> tuple:
        try:
            infos = socket.getaddrinfo(self.host, self.port, type=socket.SOCK_STREAM)
        except (socket.gaierror, UnicodeError) as e:
            raise HostResolutionError(
                "Could not resolve hostname!", data={"host": self.host, "error": str(e)}
            ) from e
        if not infos:
            raise HostResolutionError("Could not resolve hostname!", data={"host": self.host})
        return infos[0]

    def _tune(self, sock: socket.socket) -> None:
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_RCVBUF, IRC_SOCKET_RCVBUF)
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        except OSError as e:
            logger.log_event(
                "irc", "socket_option_failed", level=logging.DEBUG, user=self.username, error=str(e)
            )

    def open(self) -> None:
        """Resolve the host and connect.

        Raises:
            HostResolutionError, SocketCreationError, ConnectFailureError
        """
        family, sock_type, proto, _canon, address = self._resolve()
        try:
            sock = socket.socket(family, sock_type, proto)
        except OSError as e:
            raise SocketCreationError("Could not create socket!", data={"error": str(e)}) from e

        self._tune(sock)
        sock.settimeout(self.connect_timeout)
        try:
            sock.connect(address)
        except OSError as e:
            sock.close()
            raise ConnectFailureError(
                "Connection to Twitch IRC failed!",
                data={"host": self.host, "port": self.port, "error": str(e)},
            ) from e

        self.sock = sock
        self._connected = True
        logger.log_event(
            "irc",
            "connection_established",
            level=logging.DEBUG,
            user=self.username,
            server=self.host,
            port=self.port,
        )

    def send_line(self, line: str) -> None:
        """Write one protocol line.

        Raises:
            SendError: if the socket is gone or the write fails. A reset or
                broken pipe also marks the transport as disconnected.
        """
        if not self.connected:
            raise SendError("Socket is not connected", data={"line_verb": line.split(" ", 1)[0]})
        try:
            self.sock.sendall(to_wire(line))  # type: ignore[union-attr]
        except ConnectionError as e:
            self._connected = False
            raise SendError(f"Connection dropped while sending: {e}") from e
        except OSError as e:
            raise SendError(f"Failed to send line: {e}") from e

    def receive(self) -> bytes:
        """Return whatever is pending on the socket, or ``b""`` if nothing is.

        End of stream or a socket error flips :attr:`connected` to False.
        """
        if not self.connected:
            return b""
        sock = self.sock
        try:
            readable, _, _ = select.select([sock], [], [], 0)
            if not readable:
                return b""
            data = sock.recv(self.recv_size)  # type: ignore[union-attr]
        except (BlockingIOError, InterruptedError, socket.timeout):
            return b""
        except (OSError, ValueError) as e:
            logger.log_event(
                "irc", "receive_error", level=logging.WARNING, user=self.username, error=str(e)
            )
            self._connected = False
            return b""
        if not data:
            logger.log_event("irc", "peer_closed", level=logging.WARNING, user=self.username)
            self._connected = False
        return data

    def close(self) -> None:
        self._connected = False
        if self.sock is None:
            return
        try:
            self.sock.close()
        except OSError as e:
            logger.log_event(
                "irc", "socket_close_failed", level=logging.DEBUG, user=self.username, error=str(e)
            )
        finally:
            self.sock = None
