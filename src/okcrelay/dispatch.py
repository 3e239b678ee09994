from __future__ import annotations

import enum
from typing import BinaryIO

from .constants import CONN_CONTROL, CONN_INPUT, CONN_OUTPUT
from .errors import ProtocolError
from .frame import read_exact


class ConnectionKind(enum.IntEnum):
    CONTROL = CONN_CONTROL
    INPUT = CONN_INPUT
    OUTPUT = CONN_OUTPUT


def read_connection_kind(stream: BinaryIO) -> ConnectionKind:
    (tag,) = read_exact(stream, 1)
    try:
        return ConnectionKind(tag)
    except ValueError:
        raise ProtocolError(f"invalid connection type: {tag}") from None
