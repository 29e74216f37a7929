"""Per-shell record of created measurement ids.

One-shot invocations are separate processes, so `from last` / `from @2` in a
later command are resolved against this file. The session is keyed on the
parent process (the user's shell); each created measurement appends one line.
"""

import shutil
from pathlib import Path

import psutil
from loguru import logger

from gpcli.util.defaults import SESSION_DIR_PREFIX, SESSION_FILE_NAME, TEMP_DIR


def get_session_id() -> str:
    """The invoking shell's pid."""
    return str(psutil.Process().ppid())


def get_session_dir(session_id: str | None = None) -> Path:
    if session_id is None:
        session_id = get_session_id()
    return Path(TEMP_DIR) / f"{SESSION_DIR_PREFIX}{session_id}"


class SessionStore:
    """Append-only file of measurement ids, one per line."""

    def __init__(self, session_dir: str | Path | None = None):
        if session_dir is None or session_dir == "":
            session_dir = get_session_dir()
        self.session_dir = Path(session_dir)

    @property
    def path(self) -> Path:
        return self.session_dir / SESSION_FILE_NAME

    def append_id(self, measurement_id: str) -> None:
        """Append one id.

        A single write on an O_APPEND handle, so concurrent invocations in the
        same shell never interleave partial lines.
        """
        self.session_dir.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(measurement_id + "\n")
        logger.debug("Recorded measurement {} to {}", measurement_id, self.path)

    def load_ids(self) -> list[str]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        return [line.strip() for line in text.splitlines() if line.strip()]

    def clear(self) -> bool:
        """Remove the session directory. Returns False if there was none."""
        if not self.session_dir.exists():
            return False
        shutil.rmtree(self.session_dir)
        logger.info("Cleared session {}", self.session_dir)
        return True


def cleanup_stale_sessions(temp_dir: str | Path = TEMP_DIR) -> int:
    """Remove session directories whose shell is no longer running."""
    removed = 0
    for session_dir in Path(temp_dir).glob(f"{SESSION_DIR_PREFIX}*"):
        pid = session_dir.name[len(SESSION_DIR_PREFIX) :]
        if not pid.isdigit() or not session_dir.is_dir():
            continue
        if psutil.pid_exists(int(pid)):
            continue
        try:
            shutil.rmtree(session_dir)
            removed += 1
            logger.debug("Removed stale session {}", session_dir)
        except OSError as e:
            logger.warning(f"Could not remove stale session {session_dir}: {e}")
    return removed
