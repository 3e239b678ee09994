"""Control session: warnings, then one empty frame, then one status byte.

    ReadingWarnings --non-empty frame--> ReadingWarnings (logged)
    ReadingWarnings --empty frame------> ReadingStatus
    ReadingStatus   --status byte------> Done
"""
from __future__ import annotations

import enum

from .constants import STATUS_OK
from .errors import RemoteReportedFailure
from .frame import read_exact, read_frame
from .net import Connection


class ControlState(enum.Enum):
    READING_WARNINGS = "reading_warnings"
    READING_STATUS = "reading_status"
    DONE = "done"


def handle_control(conn: Connection) -> int:
    log = conn.log
    log.info("control connection established")
    state = ControlState.READING_WARNINGS
    warnings = 0
    status = STATUS_OK

    while state is not ControlState.DONE:
        if state is ControlState.READING_WARNINGS:
            msg = read_frame(conn.reader)
            log.debug("new warning message received", fields={"length": len(msg)})
            if msg:
                log.warning(msg)
                warnings += 1
            else:
                log.debug("all warnings processed, waiting for status code")
                state = ControlState.READING_STATUS
        else:
            (status,) = read_exact(conn.reader, 1)
            state = ControlState.DONE

    log.info("control connection finished", fields={"status_code": status, "warnings": warnings})
    if status != STATUS_OK:
        raise RemoteReportedFailure(status)
    return status
