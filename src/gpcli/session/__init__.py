"""
Measurement session engine.

- `HistoryBuffer`: circular history of measurements created this session,
  addressable with `first`, `last`, `previous`, `@N` and `@-N`.
- `PollingWindow`: bounded window of in-flight measurements for infinite mode.
- `SessionEngine`: one-shot and infinite runs on top of both.
- `SessionStore`: per-shell file of created ids, so later invocations can
  refer back to earlier ones.

Examples
--------
```python
from gpcli.session import HistoryBuffer, HistoryItem
history = HistoryBuffer(10)
history.push(HistoryItem(id="abc"))
history.resolve("@-1").id  # "abc"
```
"""

from .engine import (
    ENGINE_STATE,
    SessionEngine,
    install_signal_relay,
    run_until_signal,
)
from .history import (
    HistoryBuffer,
    HistoryItem,
    is_history_reference,
    is_partially_finished,
    parse_reference,
)
from .store import SessionStore, cleanup_stale_sessions, get_session_dir
from .window import PollingWindow

__all__ = [
    "ENGINE_STATE",
    "HistoryBuffer",
    "HistoryItem",
    "PollingWindow",
    "SessionEngine",
    "SessionStore",
    "cleanup_stale_sessions",
    "get_session_dir",
    "install_signal_relay",
    "is_history_reference",
    "is_partially_finished",
    "parse_reference",
    "run_until_signal",
]
