from __future__ import annotations

import struct
from typing import BinaryIO, Protocol

from .constants import FRAME_HEADER_FORMAT, MAX_FRAME_LEN
from .errors import ProtocolError, RelayIOError

HEADER_LEN = struct.calcsize(FRAME_HEADER_FORMAT)


class _Sink(Protocol):
    def sendall(self, data: bytes) -> object: ...


def read_exact(stream: BinaryIO, n: int) -> bytes:
    buf = bytearray()
    while len(buf) < n:
        try:
            chunk = stream.read(n - len(buf))
        except OSError as exc:
            raise RelayIOError.from_os_error(exc) from exc
        if not chunk:
            raise RelayIOError(f"unexpected end of stream: expected {n} bytes, got {len(buf)}")
        buf.extend(chunk)
    return bytes(buf)


def read_frame(stream: BinaryIO) -> str:
    """Read one length-prefixed UTF-8 string."""
    (length,) = struct.unpack(FRAME_HEADER_FORMAT, read_exact(stream, HEADER_LEN))
    payload = read_exact(stream, length)
    try:
        return payload.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ProtocolError(f"frame payload is not valid UTF-8 ({length} bytes)") from exc


def encode_frame(text: str) -> bytes:
    payload = text.encode("utf-8")
    if len(payload) > MAX_FRAME_LEN:
        raise ValueError(f"frame too large: {len(payload)} bytes")
    return struct.pack(FRAME_HEADER_FORMAT, len(payload)) + payload


def write_frame(sink: _Sink, text: str) -> None:
    sink.sendall(encode_frame(text))
