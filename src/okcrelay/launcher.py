from __future__ import annotations

import base64
import logging
import os
import subprocess
from dataclasses import dataclass, field
from typing import Callable, Protocol, Sequence

from .constants import AM_COMMAND, ENV_AM_COMMAND, EXTRA_GPG_ARGS, EXTRA_PROXY_PORT, PROXY_RECEIVER
from .errors import LaunchError


class Launcher(Protocol):
    def launch(self, port: int, args: str | None) -> None: ...


def encode_args(argv: Sequence[str]) -> str | None:
    """Base64 each argument and join with ",". No arguments -> None."""
    if not argv:
        return None
    return ",".join(base64.b64encode(a.encode("utf-8")).decode("ascii") for a in argv)


def _run(cmd: list[str]) -> int:
    return subprocess.run(cmd, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL, check=False).returncode


@dataclass(slots=True)
class BroadcastLauncher:
    """Starts the companion app by sending it an activity-manager broadcast."""

    log: logging.LoggerAdapter
    executable: str = field(default_factory=lambda: os.environ.get(ENV_AM_COMMAND, AM_COMMAND))
    runner: Callable[[list[str]], int] = _run

    def build_command(self, port: int, args: str | None) -> list[str]:
        cmd = [
            self.executable,
            "broadcast",
            "-n", PROXY_RECEIVER,
            "--ei", EXTRA_PROXY_PORT, str(port),
        ]
        if args is not None:
            cmd += ["--esa", EXTRA_GPG_ARGS, args]
        else:
            self.log.debug("no arguments specified, GPG_ARGS won't be sent")
        return cmd

    def launch(self, port: int, args: str | None) -> None:
        cmd = self.build_command(port, args)
        try:
            rc = self.runner(cmd)
        except OSError as exc:
            raise LaunchError(f"failed to run {cmd[0]}: {exc}", command=cmd) from exc
        if rc != 0:
            self.log.warning("%s exited with status %d", cmd[0], rc, fields={"returncode": rc})
        self.log.info("broadcast sent, waiting for app to connect")
