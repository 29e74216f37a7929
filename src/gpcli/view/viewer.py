"""Terminal output of measurement results."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Optional

from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from gpcli.types import (
    Clock,
    Config,
    Measurement,
    MeasurementClient,
    MeasurementCreate,
    MeasurementStatus,
    ProbeMeasurement,
    RenderError,
)
from gpcli.util import SystemClock


@dataclass
class ProbeAggregate:
    """Running ping statistics of one probe across infinite-mode rounds."""

    label: str
    sent: int = 0
    rcv: int = 0
    replies: int = 0
    rtt_min: Optional[float] = None
    rtt_max: Optional[float] = None
    rtt_sum: float = 0.0

    def add_rtt(self, rtt: float) -> None:
        self.replies += 1
        self.rtt_sum += rtt
        self.rtt_min = rtt if self.rtt_min is None else min(self.rtt_min, rtt)
        self.rtt_max = rtt if self.rtt_max is None else max(self.rtt_max, rtt)

    @property
    def rtt_avg(self) -> Optional[float]:
        if not self.replies:
            return None
        return self.rtt_sum / self.replies

    @property
    def loss(self) -> float:
        if not self.sent:
            return 0.0
        return 100.0 * (self.sent - self.rcv) / self.sent


def _ms(value: Optional[float]) -> str:
    return "-" if value is None else f"{value:.2f} ms"


class ResultsViewer:
    """Renders results to a rich console.

    Parameters
    ----------
    config : Config
        Output flags (json, latency, ci, share) and the poll interval.
    client : MeasurementClient
        Used by `output` to wait for a measurement to finish.
    """

    def __init__(
        self,
        config: Config,
        client: MeasurementClient,
        clock: Optional[Clock] = None,
        console: Optional[Console] = None,
    ):
        self.config = config
        self.client = client
        self.clock = clock if clock is not None else SystemClock()
        self.console = console if console is not None else Console(highlight=False)
        self.aggregates: dict[str, ProbeAggregate] = {}
        self._timings_printed: dict[tuple[str, int], int] = {}
        self._counted: set[tuple[str, int]] = set()
        self._headers_printed: set[str] = set()

    def _print(self, *objects, **kwargs) -> None:
        try:
            self.console.print(*objects, **kwargs)
        except OSError as e:
            raise RenderError(f"failed to write output: {e}") from e

    # ------------------------------------------------------------------------------
    # One-shot
    # ------------------------------------------------------------------------------

    def output(self, measurement_id: str, opts: MeasurementCreate) -> None:
        """Wait for a measurement to finish, then print it."""
        if self.config.ci_mode or self.config.json_output:
            m = self._wait_finished(measurement_id)
        else:
            with self.console.status(f"Waiting for {opts.type} results..."):
                m = self._wait_finished(measurement_id)

        if self.config.json_output:
            self._print(
                json.dumps(m.to_body(), indent=2),
                markup=False,
                emoji=False,
                soft_wrap=True,
            )
        elif self.config.latency:
            self.output_latency(m)
        else:
            for pm in m.results:
                self._print_probe_header(pm)
                self._print(pm.result.raw_output.strip(), markup=False)
                self._print()

        if self.config.share:
            url = f"{self.config.dashboard_url.rstrip('/')}/?measurement={m.id}"
            self._print(f"> View the results online: {url}", markup=False)

    def _wait_finished(self, measurement_id: str) -> Measurement:
        m = self.client.get_measurement(measurement_id)
        while m.status is MeasurementStatus.IN_PROGRESS:
            self.clock.sleep_sync(self.config.poll_interval)
            m = self.client.get_measurement(measurement_id)
        logger.debug("Measurement {} {}", measurement_id, m.status.value)
        return m

    def output_latency(self, m: Measurement) -> None:
        for pm in m.results:
            self._print_probe_header(pm)
            if m.type == "ping" and pm.result.stats is not None:
                self._print(f"Min: {_ms(pm.result.stats.min)}")
                self._print(f"Max: {_ms(pm.result.stats.max)}")
                self._print(f"Avg: {_ms(pm.result.stats.avg)}")
            elif m.type == "dns":
                self._print(f"Total: {_ms(pm.result.dns_total())}")
            else:
                raise RenderError(f"latency output is not supported for {m.type}")
            self._print()

    def _print_probe_header(self, pm: ProbeMeasurement) -> None:
        self._print(f"[bold cyan]> {escape(pm.probe.location_label())}[/bold cyan]")

    # ------------------------------------------------------------------------------
    # Infinite
    # ------------------------------------------------------------------------------

    def output_infinite(self, m: Measurement) -> None:
        """Print timings that arrived since the last call, never one twice."""
        if m.type and m.type != "ping":
            raise RenderError(f"continuous output is not supported for {m.type}")
        multi = len(m.results) > 1
        for i, pm in enumerate(m.results):
            label = pm.probe.location_label()
            agg = self.aggregates.setdefault(label, ProbeAggregate(label=label))
            address = pm.result.resolved_address or m.target

            if label not in self._headers_printed:
                self._headers_printed.add(label)
                if multi:
                    self._print_probe_header(pm)
                self._print(f"PING {m.target} ({address})", markup=False)

            key = (m.id, i)
            timings = pm.result.ping_timings()
            prefix = f"{label}: " if multi else ""
            for t in timings[self._timings_printed.get(key, 0) :]:
                agg.add_rtt(t.rtt)
                self._print(
                    f"{prefix}{address}: icmp_seq={agg.replies} ttl={t.ttl} "
                    f"time={t.rtt:.2f} ms",
                    markup=False,
                )
            self._timings_printed[key] = len(timings)

            if pm.result.status.terminal and key not in self._counted:
                self._counted.add(key)
                if pm.result.stats is not None:
                    agg.sent += pm.result.stats.total
                    agg.rcv += pm.result.stats.rcv
                if pm.result.status is not MeasurementStatus.FINISHED:
                    self._print(
                        f"{prefix}{pm.result.raw_output.strip()}", markup=False
                    )

    def output_summary(self) -> None:
        if not self.aggregates:
            return
        table = Table(title="Summary")
        for col in ("Location", "Sent", "Rcv", "Loss", "Min", "Avg", "Max"):
            table.add_column(col, justify="left" if col == "Location" else "right")
        for agg in self.aggregates.values():
            table.add_row(
                escape(agg.label),
                str(agg.sent),
                str(agg.rcv),
                f"{agg.loss:.2f}%",
                _ms(agg.rtt_min),
                _ms(agg.rtt_avg),
                _ms(agg.rtt_max),
            )
        self._print()
        self._print(table)
