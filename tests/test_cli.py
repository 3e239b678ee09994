from __future__ import annotations

import io
import logging

import peer
from okcrelay.cli import main
from okcrelay.logs import LogSink
from okcrelay.relay import StdStreams


def test_success_returns_zero(scripted):
    launcher = scripted(lambda port: peer.send_control(port, ["gpg: using default key"], status=0))
    out = io.StringIO()
    code = main(
        ["--armor"],
        launcher=launcher,
        stdio=StdStreams.of(io.BytesIO(), io.BytesIO()),
        sink=LogSink(level=logging.INFO, stream=out),
    )
    launcher.join()
    assert code == 0
    assert launcher.args == "LS1hcm1vcg=="
    assert "[WARNING] gpg: using default key" in out.getvalue()


def test_no_args_sends_none(scripted):
    launcher = scripted(lambda port: peer.send_control(port))
    main([], launcher=launcher, sink=LogSink(stream=io.StringIO()))
    launcher.join()
    assert launcher.args is None


def test_failure_logged_and_flushed(scripted):
    launcher = scripted(lambda port: peer.send_control(port, status=1))
    out = io.StringIO()
    code = main([], launcher=launcher, sink=LogSink(level=logging.INFO, stream=out))
    launcher.join()
    assert code == 1
    assert "[ERROR] RemoteReportedFailure" in out.getvalue()
    assert "status_code=1" in out.getvalue()
