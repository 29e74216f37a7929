# -*- coding: utf-8 -*-
"""
Utility functions and constants for gpcli.

- Logging configuration (loguru sinks)
- Default constants (API endpoints, intervals, buffer sizes)
- The system clock used for interval accounting

See Also
--------
gpcli.util.logging : Logging configuration
gpcli.util.defaults : Constants
"""

from .clock import SystemClock
from .defaults import (
    API_MIN_INTERVAL,
    DEFAULT_API_URL,
    DEFAULT_LIMIT,
    DEFAULT_LOCATION,
    DEFAULT_LOGLEVEL,
    DEFAULT_TIMEOUT,
    HISTORY_SIZE,
    INFINITE_PACKETS,
    INFINITE_PROBE_LIMIT,
    POLL_INTERVAL,
    SINGLE_LINE_ERR_LOG,
    TEST_LOGLEVEL,
    WINDOW_SIZE,
)
from .logging import (
    clear_log,
    format_error_response,
    log_default_path_client,
    shutdown_client_log,
    start_client_log,
)

__all__ = [
    "API_MIN_INTERVAL",
    "DEFAULT_API_URL",
    "DEFAULT_LIMIT",
    "DEFAULT_LOCATION",
    "DEFAULT_LOGLEVEL",
    "DEFAULT_TIMEOUT",
    "HISTORY_SIZE",
    "INFINITE_PACKETS",
    "INFINITE_PROBE_LIMIT",
    "POLL_INTERVAL",
    "SINGLE_LINE_ERR_LOG",
    "TEST_LOGLEVEL",
    "WINDOW_SIZE",
    "SystemClock",
    "clear_log",
    "format_error_response",
    "log_default_path_client",
    "shutdown_client_log",
    "start_client_log",
]
