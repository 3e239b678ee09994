from __future__ import annotations

import logging
import socket
from typing import BinaryIO

from .constants import DEFAULT_POLL_INTERVAL_S, LISTEN_HOST
from .errors import RelayIOError


class Connection:
    """One accepted stream: raw socket for writes, buffered reader for reads.

    All reads go through ``reader`` so bytes buffered while parsing the
    leading tag and frames are not lost to a later raw copy.
    """

    def __init__(self, sock: socket.socket, log: logging.LoggerAdapter):
        self.sock = sock
        self.reader: BinaryIO = sock.makefile("rb")
        self.log = log

    def send_all(self, data: bytes) -> None:
        self.sock.sendall(data)

    def close_write(self) -> None:
        self.sock.shutdown(socket.SHUT_WR)

    def close(self) -> None:
        try:
            self.reader.close()
        finally:
            self.sock.close()


class Listener:
    def __init__(self, sock: socket.socket, poll_interval_s: float = DEFAULT_POLL_INTERVAL_S):
        self.sock = sock
        self.poll_interval_s = poll_interval_s

    @classmethod
    def bind_loopback(
        cls,
        host: str = LISTEN_HOST,
        port: int = 0,
        poll_interval_s: float = DEFAULT_POLL_INTERVAL_S,
    ) -> "Listener":
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.bind((host, port))
            sock.listen()
        except OSError as exc:
            sock.close()
            raise RelayIOError.from_os_error(exc) from exc
        if poll_interval_s > 0:
            sock.settimeout(poll_interval_s)
        return cls(sock, poll_interval_s)

    @property
    def port(self) -> int:
        return self.sock.getsockname()[1]

    def accept(self) -> socket.socket | None:
        """Return the next connection, or None when the poll interval elapses."""
        try:
            conn, _ = self.sock.accept()
        except socket.timeout:
            return None
        except OSError as exc:
            raise RelayIOError.from_os_error(exc) from exc
        conn.settimeout(None)
        return conn

    def wake(self) -> None:
        """Interrupt a pending accept so the loop sees the decided outcome."""
        try:
            self.sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            # not every platform shuts down a listening socket; the poll interval still applies
            pass

    def close(self) -> None:
        self.sock.close()
