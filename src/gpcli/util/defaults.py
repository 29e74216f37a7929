# -*- coding: utf-8 -*-

import tempfile

from gpcli._version import __version__

DEFAULT_API_URL = "https://api.globalping.io/v1"
DEFAULT_DASHBOARD_URL = "https://globalping.io"
USER_AGENT = f"gpcli/{__version__} (https://github.com/jsdelivr/globalping-cli)"
DEFAULT_TIMEOUT = 30  # seconds, per HTTP request
DEFAULT_LOCATION = "world"
DEFAULT_LIMIT = 1
DEFAULT_LOGLEVEL = "INFO"
TEST_LOGLEVEL = "TRACE"
TEMP_DIR = tempfile.gettempdir()
SINGLE_LINE_ERR_LOG = False  # tracebacks logged on a single line

API_MIN_INTERVAL = 0.5  # seconds between measurement creations in infinite mode
POLL_INTERVAL = 0.5  # seconds between result polls in one-shot mode
HISTORY_SIZE = 10  # measurements kept in the session history
WINDOW_SIZE = 2  # overlapping in-flight measurements in infinite mode
INFINITE_PROBE_LIMIT = 5
INFINITE_PACKETS = 16
SESSION_DIR_PREFIX = "globalping_"
SESSION_FILE_NAME = "measurements"
