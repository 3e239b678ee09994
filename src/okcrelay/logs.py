"""Logging sink for the relay.

Records are emitted from the accept loop and from every handling thread, so
the sink queues them and writes from a single listener thread. The sink is
owned by the entry point and used as a context manager; leaving the block
on any path drains the queue and flushes stderr.

Level comes from the OKCRELAY_LOG environment variable (default INFO).
"""
from __future__ import annotations

import logging
import logging.handlers
import os
import queue
import sys
from typing import Any, Mapping, TextIO

from .constants import DEFAULT_LOG_LEVEL, ENV_LOG_LEVEL, LOGGER_NAME

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


class FieldsAdapter(logging.LoggerAdapter):
    """LoggerAdapter carrying structured key/value fields.

    Call sites add per-record fields with ``fields={...}``; child adapters
    inherit their parent's fields through ``with_fields``.
    """

    def __init__(self, logger: logging.Logger, fields: Mapping[str, Any] | None = None):
        super().__init__(logger, dict(fields or {}))

    def process(self, msg, kwargs):
        fields = dict(self.extra)
        fields.update(kwargs.pop("fields", None) or {})
        extra = dict(kwargs.get("extra") or {})
        extra["fields"] = fields
        kwargs["extra"] = extra
        return msg, kwargs

    def with_fields(self, **fields: Any) -> "FieldsAdapter":
        merged = dict(self.extra)
        merged.update(fields)
        return FieldsAdapter(self.logger, merged)


class FieldsFormatter(logging.Formatter):
    def formatMessage(self, record: logging.LogRecord) -> str:
        line = super().formatMessage(record)
        fields = getattr(record, "fields", None)
        if fields:
            line += "".join(f" {k}={v}" for k, v in fields.items())
        return line


def level_from_env(environ: Mapping[str, str] | None = None) -> int:
    env = os.environ if environ is None else environ
    name = env.get(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


class LogSink:
    def __init__(self, level: int | None = None, stream: TextIO | None = None, name: str = LOGGER_NAME):
        self.level = level_from_env() if level is None else level
        self.stream = stream
        self.name = name
        self._listener: logging.handlers.QueueListener | None = None
        self._queue_handler: logging.Handler | None = None
        self._stream_handler: logging.StreamHandler | None = None
        self._saved: tuple[int, bool] | None = None

    def __enter__(self) -> FieldsAdapter:
        logger = logging.getLogger(self.name)
        records: queue.SimpleQueue = queue.SimpleQueue()
        self._stream_handler = logging.StreamHandler(self.stream or sys.stderr)
        self._stream_handler.setFormatter(FieldsFormatter(LOG_FORMAT))
        self._queue_handler = logging.handlers.QueueHandler(records)
        self._listener = logging.handlers.QueueListener(records, self._stream_handler)
        self._saved = (logger.level, logger.propagate)
        logger.addHandler(self._queue_handler)
        logger.setLevel(self.level)
        logger.propagate = False
        self._listener.start()
        return FieldsAdapter(logger)

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self._listener is None:
            return
        logger = logging.getLogger(self.name)
        logger.removeHandler(self._queue_handler)
        self._listener.stop()
        self._stream_handler.flush()
        logger.setLevel(self._saved[0])
        logger.propagate = self._saved[1]
        self._listener = None
