"""Interfaces of the collaborators the session engine calls out to.

The engine only depends on these protocols; tests substitute fakes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, runtime_checkable

from .messages import Measurement, MeasurementCreate, MeasurementCreateResponse


@runtime_checkable
class MeasurementClient(Protocol):
    def create_measurement(
        self, opts: MeasurementCreate
    ) -> tuple[MeasurementCreateResponse | None, bool, Exception | None]:
        """Create a measurement.

        Returns `(response, show_help, error)`; `show_help` marks
        usage-format failures.
        """
        ...

    def get_measurement(self, measurement_id: str) -> Measurement:
        """Current state of a measurement. Raises `ClientError`."""
        ...


@runtime_checkable
class Renderer(Protocol):
    def output(self, measurement_id: str, opts: MeasurementCreate) -> None: ...

    def output_infinite(self, measurement: Measurement) -> None: ...

    def output_summary(self) -> None: ...


@runtime_checkable
class Clock(Protocol):
    def now(self) -> float:
        """Monotonic seconds."""
        ...

    def utcnow(self) -> datetime:
        """Wall-clock timestamp for history items."""
        ...

    async def sleep(self, seconds: float) -> None: ...

    def sleep_sync(self, seconds: float) -> None:
        """Blocking sleep, for callers outside the event loop."""
        ...


@runtime_checkable
class SessionStoreProtocol(Protocol):
    def append_id(self, measurement_id: str) -> None: ...

    def load_ids(self) -> list[str]: ...
