"""Tests for the infinite-mode polling window."""

import pytest

from gpcli.session import HistoryItem, PollingWindow


def items(*ids, partial=False):
    return [HistoryItem(id=i, partially_finished=partial) for i in ids]


def sweep(window: PollingWindow) -> list[str]:
    window.restart()
    seen = []
    el = window.next()
    while el is not None:
        seen.append(el.id)
        el = window.next()
    return seen


def test_sweep_is_fifo():
    window = PollingWindow(3)
    for item in items("a", "b", "c"):
        window.append(item)
    assert sweep(window) == ["a", "b", "c"]
    assert window.next() is None
    # restart does not change contents
    assert sweep(window) == ["a", "b", "c"]
    assert len(window) == 3


def test_append_beyond_capacity_fails_fast():
    window = PollingWindow(1)
    window.append(HistoryItem(id="a"))
    with pytest.raises(RuntimeError):
        window.append(HistoryItem(id="b"))


def test_can_append_requires_a_partially_finished_item():
    window = PollingWindow(2)
    assert not window.can_append()  # empty

    a = HistoryItem(id="a")
    window.append(a)
    assert not window.can_append()

    a.partially_finished = True
    assert window.can_append()


def test_can_append_false_when_full_regardless_of_flags():
    window = PollingWindow(2)
    for item in items("a", "b", partial=True):
        window.append(item)
    assert not window.can_append()


def test_remove_before_cursor_decrements_it():
    window = PollingWindow(3)
    a, b, c = items("a", "b", "c")
    for item in (a, b, c):
        window.append(item)
    window.restart()
    assert window.next() is a
    assert window.next() is b
    assert window.pos == 2

    window.remove(a)
    assert window.pos == 1
    assert window.next() is c
    assert window.next() is None


def test_remove_current_item_mid_sweep_does_not_skip():
    window = PollingWindow(3)
    a, b, c = items("a", "b", "c")
    for item in (a, b, c):
        window.append(item)
    window.restart()
    assert window.next() is a
    window.remove(a)
    assert window.next() is b
    window.remove(b)
    assert window.next() is c
    assert window.next() is None
    assert window.items == [c]


def test_remove_after_cursor_keeps_it():
    window = PollingWindow(3)
    a, b, c = items("a", "b", "c")
    for item in (a, b, c):
        window.append(item)
    window.restart()
    window.next()
    window.remove(c)
    assert window.pos == 1
    assert window.next() is b
    assert window.next() is None


def test_remove_is_by_identity():
    window = PollingWindow(2)
    a = HistoryItem(id="same")
    twin = HistoryItem(id="same")
    window.append(a)
    window.remove(twin)
    assert window.items == [a]


def test_append_during_sweep_is_visited():
    window = PollingWindow(2)
    a, b = items("a", "b")
    window.append(a)
    window.restart()
    assert window.next() is a
    window.append(b)
    assert window.next() is b
