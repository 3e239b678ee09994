from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import BinaryIO, Callable

from .constants import COPY_CHUNK_SIZE, STDIO_PATH
from .errors import RelayIOError
from .frame import read_frame
from .net import Connection


def _stdin() -> BinaryIO:
    return sys.stdin.buffer


def _stdout() -> BinaryIO:
    return sys.stdout.buffer


@dataclass(slots=True)
class StdStreams:
    """Standard streams the "-" path maps to; replaced in tests."""

    stdin_factory: Callable[[], BinaryIO] = field(default=_stdin)
    stdout_factory: Callable[[], BinaryIO] = field(default=_stdout)

    @classmethod
    def of(cls, stdin: BinaryIO, stdout: BinaryIO) -> "StdStreams":
        return cls(lambda: stdin, lambda: stdout)


def copy_stream(src: BinaryIO, write: Callable[[bytes], object], chunk_size: int = COPY_CHUNK_SIZE) -> int:
    # read1 hands over whatever is available instead of waiting for a full chunk
    read = getattr(src, "read1", src.read)
    total = 0
    while True:
        chunk = read(chunk_size)
        if not chunk:
            return total
        write(chunk)
        total += len(chunk)


def handle_input(conn: Connection, stdio: StdStreams) -> int:
    """Stream a local source into the connection, then half-close it."""
    path = read_frame(conn.reader)
    log = conn.log.with_fields(path=path)
    log.info("input connection established")

    if path == STDIO_PATH:
        log.debug("reading from stdin")
        total = _copy_or_raise(stdio.stdin_factory(), conn.send_all, path)
    else:
        try:
            src = open(path, "rb")
        except OSError as exc:
            raise RelayIOError.from_os_error(exc, path=path) from exc
        log.debug("reading from file")
        with src:
            total = _copy_or_raise(src, conn.send_all, path)

    try:
        conn.close_write()
    except OSError as exc:
        raise RelayIOError.from_os_error(exc, path=path) from exc
    log.info("input connection finished", fields={"bytes": total})
    return total


def handle_output(conn: Connection, stdio: StdStreams) -> int:
    """Stream the connection into a local sink until the peer closes it."""
    path = read_frame(conn.reader)
    log = conn.log.with_fields(path=path)
    log.info("output connection established")

    if path == STDIO_PATH:
        log.debug("writing to stdout")
        sink = stdio.stdout_factory()
        total = _copy_or_raise(conn.reader, sink.write, path)
        _flush_or_raise(sink, path)
    else:
        try:
            sink = open(path, "wb")
        except OSError as exc:
            raise RelayIOError.from_os_error(exc, path=path) from exc
        log.debug("writing to file")
        with sink:
            total = _copy_or_raise(conn.reader, sink.write, path)
            _flush_or_raise(sink, path)

    log.info("output connection finished", fields={"bytes": total})
    return total


def _copy_or_raise(src: BinaryIO, write: Callable[[bytes], object], path: str) -> int:
    try:
        return copy_stream(src, write)
    except OSError as exc:
        raise RelayIOError.from_os_error(exc, path=path) from exc


def _flush_or_raise(sink: BinaryIO, path: str) -> None:
    try:
        sink.flush()
    except OSError as exc:
        raise RelayIOError.from_os_error(exc, path=path) from exc
