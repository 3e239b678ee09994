from __future__ import annotations

import logging
import socket
import threading

import pytest

from okcrelay.logs import FieldsAdapter
from okcrelay.net import Connection


@pytest.fixture
def log() -> FieldsAdapter:
    return FieldsAdapter(logging.getLogger("relaytest"))


@pytest.fixture
def conn_pair(log):
    """(Connection under test, raw peer socket) over a local socketpair."""
    ours, theirs = socket.socketpair()
    conn = Connection(ours, log)
    yield conn, theirs
    conn.close()
    theirs.close()


class ScriptedLauncher:
    """Launcher stand-in: runs `script(port)` on a thread, like the app connecting back."""

    def __init__(self, script):
        self.script = script
        self.port: int | None = None
        self.args: str | None = None
        self.error: BaseException | None = None
        self.thread: threading.Thread | None = None

    def launch(self, port: int, args: str | None) -> None:
        self.port, self.args = port, args

        def run():
            try:
                self.script(port)
            except Exception as exc:
                self.error = exc

        self.thread = threading.Thread(target=run, daemon=True)
        self.thread.start()

    def join(self, timeout: float = 5.0) -> None:
        if self.thread is not None:
            self.thread.join(timeout)
        if self.error is not None:
            raise self.error


@pytest.fixture
def scripted():
    return ScriptedLauncher
