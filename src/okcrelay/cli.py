from __future__ import annotations

import sys
from typing import Sequence

from .errors import RelayError
from .launcher import BroadcastLauncher, Launcher, encode_args
from .logs import LogSink
from .outcome import exit_process
from .relay import StdStreams
from .server import RelayServer


def main(
    argv: Sequence[str] | None = None,
    *,
    launcher: Launcher | None = None,
    stdio: StdStreams | None = None,
    sink: LogSink | None = None,
) -> int:
    """Run the relay and return the process exit status.

    Every argument is passed through to the companion app; the sink is
    flushed before this returns, whatever the outcome.
    """
    args = list(sys.argv[1:] if argv is None else argv)
    with sink or LogSink() as log:
        server = RelayServer(
            launcher=launcher or BroadcastLauncher(log),
            log=log,
            launch_args=encode_args(args),
            stdio=stdio or StdStreams(),
        )
        outcome = server.serve()
        if outcome.error is not None:
            _log_fatal(log, outcome.error)
    return outcome.code


def _log_fatal(log, error: RelayError) -> None:
    log.error("%s: %s", type(error).__name__, error, fields=error.fields())
    log.debug("fatal error traceback", exc_info=error)


def entrypoint() -> None:
    exit_process(main())


if __name__ == "__main__":
    entrypoint()
