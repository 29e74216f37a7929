"""Session history of created measurements.

`HistoryBuffer` is a fixed-size circular log. Alongside the slots it keeps
`index`, the number of measurements ever pushed this session, so that a
reference past the retained window (`IndexOutOfRange`) can be told apart from
a session with no measurements at all (`NoPreviousMeasurements`).

Reference grammar accepted by `HistoryBuffer.resolve`:

| reference            | resolves to                                  |
|----------------------|----------------------------------------------|
| `last`, `previous`   | most recent item                             |
| `first`              | oldest retained item                         |
| `@N`                 | N-th item created this session               |
| `@-N`                | N-th most recent item (`@-1` == `last`)      |

Once the buffer has wrapped, `@N` for an overwritten item is out of range, while
`first` moves on to the oldest item still retained. For every retained N,
`@N` and `@-(index - N + 1)` are the same item.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

from loguru import logger

from gpcli.types import (
    IndexOutOfRange,
    InvalidIndex,
    Measurement,
    MeasurementStatus,
    NoPreviousMeasurements,
)

_NAMED_REFERENCES = {"first": 1, "last": -1, "previous": -1}
_INDEX_RE = re.compile(r"^@(-?)(\d+)$")


def is_history_reference(token: str) -> bool:
    """True if `token` should be resolved through the history, not sent as a location."""
    token = token.strip()
    return token in _NAMED_REFERENCES or token.startswith("@")


def parse_reference(reference: str) -> int:
    """Turn a reference into a signed 1-based index.

    Positive values count from the first item created this session, negative
    values from the most recent one. `first` maps to 1 here; `HistoryBuffer`
    resolves it to the oldest retained item instead.

    Raises
    ------
    InvalidIndex
        For anything that is not a named reference or `@N` / `@-N` with N > 0.
    """
    reference = reference.strip()
    if reference in _NAMED_REFERENCES:
        return _NAMED_REFERENCES[reference]
    match = _INDEX_RE.match(reference)
    if match is None:
        raise InvalidIndex()
    n = int(match.group(2))
    if n == 0:
        raise InvalidIndex()
    return -n if match.group(1) else n


@dataclass(eq=False)
class HistoryItem:
    """One measurement created during the session.

    Compared by identity: the polling window removes items by reference.
    """

    id: str
    status: MeasurementStatus = MeasurementStatus.IN_PROGRESS
    probe_status: list[MeasurementStatus] = field(default_factory=list)
    started_at: Optional[datetime] = None
    partially_finished: bool = False

    def update(self, measurement: Measurement) -> None:
        """Apply a poll result. Status never leaves a terminal state."""
        if not self.status.terminal:
            self.status = measurement.status
        if not self.status.terminal and len(measurement.results) > 1:
            self.probe_status = [r.result.status for r in measurement.results]
        else:
            self.probe_status = []
        self.partially_finished = is_partially_finished(measurement)


def is_partially_finished(measurement: Measurement) -> bool:
    """In progress overall, but at least one probe already finished."""
    if measurement.status is not MeasurementStatus.IN_PROGRESS:
        return False
    return any(
        r.result.status is MeasurementStatus.FINISHED for r in measurement.results
    )


class HistoryBuffer:
    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError(f"History capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self.slots: list[Optional[HistoryItem]] = [None] * capacity
        self.index = 0  # measurements created this session

    def __len__(self) -> int:
        return min(self.index, self.capacity)

    def __repr__(self):
        return (
            f"HistoryBuffer(capacity={self.capacity}, index={self.index}, "
            f"ids={[item.id for item in self.items()]})"
        )

    def push(self, item: HistoryItem) -> None:
        self.slots[self.index % self.capacity] = item
        self.index += 1

    def extend(self, items: Iterable[HistoryItem]) -> None:
        for item in items:
            self.push(item)

    def last(self) -> Optional[HistoryItem]:
        if self.index == 0:
            return None
        return self.slots[(self.index - 1) % self.capacity]

    def items(self) -> list[HistoryItem]:
        """Retained items, oldest first."""
        start = self.index - len(self)
        return [self.slots[i % self.capacity] for i in range(start, self.index)]

    def find(self, measurement_id: str) -> Optional[HistoryItem]:
        for item in self.slots:
            if item is not None and item.id == measurement_id:
                return item
        return None

    def resolve(self, reference: str) -> HistoryItem:
        """Resolve a history reference (see module docstring).

        Raises
        ------
        InvalidIndex
            Malformed reference.
        NoPreviousMeasurements
            Nothing was created this session.
        IndexOutOfRange
            Reference points before the oldest retained item or past the newest.
        """
        reference = reference.strip()
        idx = parse_reference(reference)
        if self.index == 0:
            raise NoPreviousMeasurements()
        retained = len(self)
        if reference == "first":
            created = self.index - retained + 1
        elif idx > 0:
            created = idx
        else:
            created = self.index + idx + 1
        if created > self.index or created <= self.index - retained:
            logger.debug(
                "Reference {!r} outside retained history ({} of {} created)",
                reference,
                retained,
                self.index,
            )
            raise IndexOutOfRange()
        return self.slots[(created - 1) % self.capacity]
