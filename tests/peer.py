"""Companion-app side of the relay protocol, for the test suite.

Each helper opens one connection to the listener and speaks the app's half
of the exchange.
"""
from __future__ import annotations

import socket
from typing import Iterable

from okcrelay.constants import LISTEN_HOST, STATUS_OK
from okcrelay.dispatch import ConnectionKind
from okcrelay.frame import encode_frame, write_frame


def connect(port: int, kind: ConnectionKind | int, host: str = LISTEN_HOST) -> socket.socket:
    sock = socket.create_connection((host, port))
    sock.sendall(bytes([int(kind)]))
    return sock


def send_control(port: int, warnings: Iterable[str] = (), status: int = STATUS_OK) -> None:
    body = b"".join(encode_frame(w) for w in warnings if w)
    body += encode_frame("") + bytes([status])
    with connect(port, ConnectionKind.CONTROL) as sock:
        sock.sendall(body)


def open_input(port: int, path: str) -> socket.socket:
    """Request `path` from the relay; read the returned socket until EOF."""
    sock = connect(port, ConnectionKind.INPUT)
    write_frame(sock, path)
    return sock


def open_output(port: int, path: str) -> socket.socket:
    sock = connect(port, ConnectionKind.OUTPUT)
    write_frame(sock, path)
    return sock


def send_output(port: int, path: str, data: bytes) -> None:
    with open_output(port, path) as sock:
        sock.sendall(data)


def read_all(sock: socket.socket, bufsize: int = 65536) -> bytes:
    chunks = []
    while True:
        chunk = sock.recv(bufsize)
        if not chunk:
            return b"".join(chunks)
        chunks.append(chunk)
