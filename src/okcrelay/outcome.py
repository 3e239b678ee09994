from __future__ import annotations

import os
import sys
import threading
from dataclasses import dataclass
from typing import Callable

from .constants import EXIT_FAILURE, EXIT_SUCCESS
from .errors import RelayError


@dataclass(frozen=True, slots=True)
class ExitOutcome:
    code: int
    error: RelayError | None = None

    @property
    def ok(self) -> bool:
        return self.code == EXIT_SUCCESS

    @staticmethod
    def success() -> "ExitOutcome":
        return ExitOutcome(code=EXIT_SUCCESS)

    @staticmethod
    def failure(error: RelayError) -> "ExitOutcome":
        return ExitOutcome(code=EXIT_FAILURE, error=error)


class Terminator:
    """Holds the process exit decision. The first outcome set wins."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._decided = threading.Event()
        self._outcome: ExitOutcome | None = None
        self._callbacks: list[Callable[[], None]] = []

    def terminate(self, outcome: ExitOutcome) -> bool:
        with self._lock:
            if self._outcome is not None:
                return False
            self._outcome = outcome
            callbacks, self._callbacks = self._callbacks, []
        self._decided.set()
        for cb in callbacks:
            cb()
        return True

    def on_decided(self, callback: Callable[[], None]) -> None:
        """Run `callback` once the outcome is set (immediately if it already is)."""
        with self._lock:
            if self._outcome is None:
                self._callbacks.append(callback)
                return
        callback()

    def succeed(self) -> bool:
        return self.terminate(ExitOutcome.success())

    def fail(self, error: RelayError) -> bool:
        return self.terminate(ExitOutcome.failure(error))

    @property
    def is_set(self) -> bool:
        return self._decided.is_set()

    @property
    def outcome(self) -> ExitOutcome | None:
        return self._outcome

    def wait(self, timeout: float | None = None) -> ExitOutcome | None:
        self._decided.wait(timeout)
        return self._outcome


def exit_process(code: int) -> None:
    # handler threads may still be blocked on sockets or stdin; skip joining them
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.flush()
        except (OSError, ValueError):
            pass
    os._exit(code)
