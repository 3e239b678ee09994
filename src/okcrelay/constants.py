from __future__ import annotations

FRAME_HEADER_FORMAT = "!H"  # payload length, big-endian
MAX_FRAME_LEN = 0xFFFF

CONN_CONTROL = 0
CONN_INPUT = 1
CONN_OUTPUT = 2

STATUS_OK = 0
STDIO_PATH = "-"

LISTEN_HOST = "127.0.0.1"
DEFAULT_POLL_INTERVAL_S = 0.2
COPY_CHUNK_SIZE = 64 * 1024

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

AM_COMMAND = "am"
PROXY_RECEIVER = "org.ddosolitary.okcagent/.GpgProxyReceiver"
EXTRA_PROXY_PORT = "org.ddosolitary.okcagent.extra.PROXY_PORT"
EXTRA_GPG_ARGS = "org.ddosolitary.okcagent.extra.GPG_ARGS"

ENV_LOG_LEVEL = "OKCRELAY_LOG"
ENV_AM_COMMAND = "OKCRELAY_AM"
DEFAULT_LOG_LEVEL = "INFO"
LOGGER_NAME = "okcrelay"
