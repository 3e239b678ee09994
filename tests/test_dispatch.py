from __future__ import annotations

import io

import pytest

from okcrelay.dispatch import ConnectionKind, read_connection_kind
from okcrelay.errors import ProtocolError, RelayIOError


@pytest.mark.parametrize(
    "tag,kind",
    [(0, ConnectionKind.CONTROL), (1, ConnectionKind.INPUT), (2, ConnectionKind.OUTPUT)],
)
def test_known_tags(tag, kind):
    assert read_connection_kind(io.BytesIO(bytes([tag]))) is kind


@pytest.mark.parametrize("tag", [3, 42, 255])
def test_unknown_tag_is_protocol_error(tag):
    with pytest.raises(ProtocolError, match="invalid connection type"):
        read_connection_kind(io.BytesIO(bytes([tag])))


def test_tag_is_read_once():
    stream = io.BytesIO(b"\x01rest")
    read_connection_kind(stream)
    assert stream.read() == b"rest"


def test_closed_before_tag():
    with pytest.raises(RelayIOError):
        read_connection_kind(io.BytesIO(b""))
