"""Tests for the session history buffer and its reference grammar."""

import pytest

from gpcli.session import HistoryBuffer, HistoryItem, is_history_reference
from gpcli.session.history import parse_reference
from gpcli.types import (
    IndexOutOfRange,
    InvalidIndex,
    MeasurementStatus,
    NoPreviousMeasurements,
)
from fakes import make_measurement


def filled(capacity: int, n: int) -> HistoryBuffer:
    history = HistoryBuffer(capacity)
    for i in range(1, n + 1):
        history.push(HistoryItem(id=f"m{i}"))
    return history


def test_empty_buffer():
    history = HistoryBuffer(10)
    assert history.last() is None
    assert history.find("m1") is None
    assert len(history) == 0
    assert history.items() == []


@pytest.mark.parametrize("capacity", [1, 2, 3, 10])
@pytest.mark.parametrize("n", [1, 2, 3, 4, 9, 10, 11, 25])
def test_first_is_oldest_retained_and_last_is_newest(capacity, n):
    history = filled(capacity, n)
    oldest_retained = max(1, n - capacity + 1)

    assert history.resolve("first").id == f"m{oldest_retained}"
    assert history.resolve("last").id == f"m{n}"
    assert history.resolve("previous") is history.last()
    assert history.resolve("@-1") is history.last()
    assert history.index == n
    assert len(history) == min(n, capacity)


@pytest.mark.parametrize(
    "capacity,n",
    [(10, 1), (10, 7), (10, 10), (3, 3), (1, 4), (3, 5), (10, 11), (10, 25)],
)
def test_positive_and_negative_indices_agree(capacity, n):
    history = filled(capacity, n)
    for k in range(max(1, n - capacity + 1), n + 1):
        assert history.resolve(f"@{k}").id == f"m{k}"
        assert history.resolve(f"@{k}") is history.resolve(f"@-{n - k + 1}")


@pytest.mark.parametrize("capacity,n", [(1, 4), (3, 5), (10, 11), (10, 25)])
def test_overwritten_items_are_out_of_range(capacity, n):
    history = filled(capacity, n)
    for k in range(1, n - capacity + 1):
        with pytest.raises(IndexOutOfRange):
            history.resolve(f"@{k}")
    with pytest.raises(IndexOutOfRange):
        history.resolve(f"@{n + 1}")
    with pytest.raises(IndexOutOfRange):
        history.resolve(f"@-{capacity + 1}")


def test_at_one_is_first_created():
    history = filled(10, 4)
    assert history.resolve("@1") is history.resolve("first")
    assert history.resolve("@1").id == "m1"


def test_wraparound_overwrites_oldest():
    history = filled(3, 5)
    assert [item.id for item in history.items()] == ["m3", "m4", "m5"]
    assert history.resolve("first").id == "m3"
    assert history.resolve("@3").id == "m3"
    assert history.resolve("@4").id == "m4"
    assert history.resolve("@5").id == "m5"
    assert history.resolve("@-3").id == "m3"
    assert history.find("m1") is None
    assert history.find("m4").id == "m4"


def test_out_of_range():
    history = filled(10, 3)
    with pytest.raises(IndexOutOfRange):
        history.resolve("@4")
    with pytest.raises(IndexOutOfRange):
        history.resolve("@-4")


def test_evicted_items_are_out_of_range():
    history = filled(3, 5)
    with pytest.raises(IndexOutOfRange):
        history.resolve("@-4")
    with pytest.raises(IndexOutOfRange):
        history.resolve("@2")
    with pytest.raises(IndexOutOfRange):
        history.resolve("@6")


@pytest.mark.parametrize("reference", ["first", "last", "previous", "@1", "@-1", "@3"])
def test_no_previous_measurements(reference):
    with pytest.raises(NoPreviousMeasurements):
        HistoryBuffer(10).resolve(reference)


@pytest.mark.parametrize("reference", ["@0", "@x", "@", "@-0", "@-x", "@1.5", "@ 1"])
@pytest.mark.parametrize("n", [0, 3])
def test_invalid_index(reference, n):
    with pytest.raises(InvalidIndex):
        filled(10, n).resolve(reference)


def test_error_messages():
    assert str(InvalidIndex()) == "invalid index"
    assert str(IndexOutOfRange()) == "index out of range"
    assert str(NoPreviousMeasurements()) == "no previous measurements found"


def test_reference_is_trimmed():
    history = filled(10, 2)
    assert history.resolve("  last ").id == "m2"
    assert history.resolve(" @1").id == "m1"


def test_parse_reference():
    assert parse_reference("first") == 1
    assert parse_reference("last") == -1
    assert parse_reference("previous") == -1
    assert parse_reference("@7") == 7
    assert parse_reference("@-2") == -2


def test_is_history_reference():
    assert is_history_reference("last")
    assert is_history_reference("@-2")
    assert is_history_reference("@x")
    assert not is_history_reference("Berlin")
    assert not is_history_reference("Last")
    assert not is_history_reference("nzGzfAGL7sZfUs3c")


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        HistoryBuffer(0)


def test_item_update_status_is_monotonic():
    item = HistoryItem(id="m1")
    item.update(
        make_measurement(
            "m1",
            MeasurementStatus.IN_PROGRESS,
            (MeasurementStatus.FINISHED, MeasurementStatus.IN_PROGRESS),
        )
    )
    assert item.status is MeasurementStatus.IN_PROGRESS
    assert item.probe_status == [
        MeasurementStatus.FINISHED,
        MeasurementStatus.IN_PROGRESS,
    ]
    assert item.partially_finished

    item.update(make_measurement("m1", MeasurementStatus.FINISHED))
    assert item.status is MeasurementStatus.FINISHED
    assert item.probe_status == []
    assert not item.partially_finished

    item.update(make_measurement("m1", MeasurementStatus.IN_PROGRESS))
    assert item.status is MeasurementStatus.FINISHED


def test_single_probe_in_progress_is_not_partially_finished():
    item = HistoryItem(id="m1")
    item.update(make_measurement("m1", MeasurementStatus.IN_PROGRESS))
    assert item.probe_status == []
    assert not item.partially_finished
