"""Per-invocation configuration."""

from dataclasses import dataclass

from gpcli.util.defaults import (
    API_MIN_INTERVAL,
    DEFAULT_API_URL,
    DEFAULT_DASHBOARD_URL,
    DEFAULT_LIMIT,
    DEFAULT_LOCATION,
    DEFAULT_TIMEOUT,
    HISTORY_SIZE,
    INFINITE_PROBE_LIMIT,
    POLL_INTERVAL,
    WINDOW_SIZE,
)


@dataclass(kw_only=True)
class Config:
    """Everything one command invocation needs, built once by the CLI.

    Passed by reference to the engine, client and viewer; nothing reads
    command-line state from module globals.
    """

    cmd: str = ""
    target: str = ""
    from_: str = DEFAULT_LOCATION
    limit: int = DEFAULT_LIMIT

    # output
    json_output: bool = False
    latency: bool = False
    ci_mode: bool = False
    share: bool = False

    # ping
    packets: int = 0
    infinite: bool = False

    # traceroute / mtr / dns
    protocol: str = ""
    port: int = 0
    query_type: str = ""
    resolver: str = ""
    trace: bool = False

    # api
    api_url: str = DEFAULT_API_URL
    dashboard_url: str = DEFAULT_DASHBOARD_URL
    api_token: str = ""
    timeout: float = DEFAULT_TIMEOUT
    api_min_interval: float = API_MIN_INTERVAL
    poll_interval: float = POLL_INTERVAL

    # session engine
    history_size: int = HISTORY_SIZE
    window_size: int = WINDOW_SIZE
    infinite_probe_limit: int = INFINITE_PROBE_LIMIT
    session_dir: str = ""  # "" -> per-shell temp dir
