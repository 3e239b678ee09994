from __future__ import annotations

import socket
import threading
from dataclasses import dataclass, field

from .constants import DEFAULT_POLL_INTERVAL_S
from .control import handle_control
from .dispatch import ConnectionKind, read_connection_kind
from .errors import RelayError, RelayIOError
from .launcher import Launcher
from .logs import FieldsAdapter
from .net import Connection, Listener
from .outcome import ExitOutcome, Terminator
from .relay import StdStreams, handle_input, handle_output


@dataclass(slots=True)
class RelayServer:
    launcher: Launcher
    log: FieldsAdapter
    launch_args: str | None = None
    stdio: StdStreams = field(default_factory=StdStreams)
    poll_interval_s: float = DEFAULT_POLL_INTERVAL_S
    terminator: Terminator = field(default_factory=Terminator)

    def serve(self) -> ExitOutcome:
        """Run until a control session or a failure decides the outcome.

        Connections still in flight at that point are abandoned, not drained.
        """
        try:
            listener = Listener.bind_loopback(poll_interval_s=self.poll_interval_s)
        except RelayError as exc:
            self.terminator.fail(exc)
            return self.terminator.outcome

        self.terminator.on_decided(listener.wake)
        try:
            port = listener.port
            self.log.info("listening on port %d", port)
            try:
                self.launcher.launch(port, self.launch_args)
            except RelayError as exc:
                self.terminator.fail(exc)
                return self.terminator.outcome
            self._accept_loop(listener)
        finally:
            listener.close()
        return self.terminator.outcome

    def _accept_loop(self, listener: Listener) -> None:
        while not self.terminator.is_set:
            try:
                sock = listener.accept()
            except RelayError as exc:
                self._fail(exc)
                return
            if sock is None:
                continue
            self.log.debug("new incoming connection")
            threading.Thread(
                target=self._handle_connection,
                args=(sock,),
                daemon=True,
                name="okcrelay-conn",
            ).start()

    def _handle_connection(self, sock: socket.socket) -> None:
        try:
            log = self.log.with_fields(remote_port=sock.getpeername()[1])
        except OSError as exc:
            sock.close()
            self._fail(RelayIOError.from_os_error(exc))
            return

        conn = Connection(sock, log)
        log.debug("connection accepted")
        try:
            kind = read_connection_kind(conn.reader)
            log.debug("connection type is %d", int(kind), fields={"kind": kind.name.lower()})
            if kind is ConnectionKind.CONTROL:
                handle_control(conn)
                if self.terminator.succeed():
                    log.info("control session succeeded, exiting")
            elif kind is ConnectionKind.INPUT:
                handle_input(conn, self.stdio)
            else:
                handle_output(conn, self.stdio)
        except RelayError as exc:
            self._fail(exc, log)
        except OSError as exc:
            self._fail(RelayIOError.from_os_error(exc), log)
        except Exception as exc:
            log.exception("unexpected error in connection handler")
            self._fail(RelayError(f"{type(exc).__name__}: {exc}"), log)
        finally:
            conn.close()

    def _fail(self, exc: RelayError, log: FieldsAdapter | None = None) -> None:
        log = log or self.log
        if not self.terminator.fail(exc):
            log.debug("outcome already decided, dropping error", fields=exc.fields())
