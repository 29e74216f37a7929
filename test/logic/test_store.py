"""Tests for the per-shell session file."""

from unittest.mock import patch

from gpcli.session import SessionStore, cleanup_stale_sessions, get_session_dir
from fakes import MEASUREMENT_ID1, MEASUREMENT_ID2


def test_append_creates_dir_and_one_line_per_id(session_dir):
    store = SessionStore(session_dir)
    assert store.load_ids() == []

    store.append_id(MEASUREMENT_ID1)
    store.append_id(MEASUREMENT_ID2)

    assert store.path == session_dir / "measurements"
    assert store.path.read_text() == f"{MEASUREMENT_ID1}\n{MEASUREMENT_ID2}\n"
    assert store.load_ids() == [MEASUREMENT_ID1, MEASUREMENT_ID2]


def test_load_skips_blank_lines(session_dir):
    session_dir.mkdir()
    (session_dir / "measurements").write_text(f"\n{MEASUREMENT_ID1}\n  \n")

    assert SessionStore(session_dir).load_ids() == [MEASUREMENT_ID1]


def test_clear(session_dir):
    store = SessionStore(session_dir)
    assert not store.clear()

    store.append_id(MEASUREMENT_ID1)
    assert store.clear()
    assert not session_dir.exists()
    assert store.load_ids() == []


def test_session_dir_is_keyed_on_parent_pid():
    with patch("gpcli.session.store.get_session_id", return_value="4242"):
        assert get_session_dir().name == "globalping_4242"
    assert get_session_dir("7").name == "globalping_7"


def test_cleanup_removes_only_dead_sessions(tmp_path):
    for name in ("globalping_100", "globalping_200", "globalping_abc", "other"):
        (tmp_path / name).mkdir()

    with patch("psutil.pid_exists", side_effect=lambda pid: pid == 100):
        removed = cleanup_stale_sessions(tmp_path)

    assert removed == 1
    assert sorted(p.name for p in tmp_path.iterdir()) == [
        "globalping_100",
        "globalping_abc",
        "other",
    ]
