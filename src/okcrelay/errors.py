"""Error family shared by every stage of the relay.

Every kind is fatal: nothing is retried, and the listener loop turns the
first one it sees into a failed exit outcome.
"""
from __future__ import annotations


class RelayError(Exception):
    kind = "relay"

    def fields(self) -> dict:
        return {"kind": self.kind}


class RelayIOError(RelayError):
    """Read, write, open or accept failure, including a short read."""

    kind = "io"

    def __init__(self, message: str, *, path: str | None = None, cause: BaseException | None = None):
        super().__init__(message)
        self.path = path
        self.cause = cause

    @classmethod
    def from_os_error(cls, exc: OSError, path: str | None = None) -> "RelayIOError":
        return cls(str(exc) or type(exc).__name__, path=path, cause=exc)

    def fields(self) -> dict:
        out = super().fields()
        if self.path is not None:
            out["path"] = self.path
        if self.cause is not None:
            out["cause"] = type(self.cause).__name__
        return out


class ProtocolError(RelayError):
    """Invalid connection-type byte or malformed frame."""

    kind = "protocol"


class RemoteReportedFailure(RelayError):
    kind = "remote"

    def __init__(self, status: int):
        super().__init__(f"an error has occurred in the app (status {status})")
        self.status = status

    def fields(self) -> dict:
        out = super().fields()
        out["status_code"] = self.status
        return out


class LaunchError(RelayError):
    kind = "launch"

    def __init__(self, message: str, *, command: list[str] | None = None):
        super().__init__(message)
        self.command = command

    def fields(self) -> dict:
        out = super().fields()
        if self.command:
            out["command"] = self.command[0]
        return out
