"""Tests for terminal rendering of results."""

import io
import json

import pytest
from rich.console import Console

from gpcli.types import Config, MeasurementCreate, MeasurementStatus, PingStats, RenderError
from gpcli.view import ResultsViewer
from fakes import (
    MEASUREMENT_ID1,
    MEASUREMENT_ID2,
    FakeClient,
    FakeClock,
    make_measurement,
)

IP = MeasurementStatus.IN_PROGRESS
FIN = MeasurementStatus.FINISHED


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=200, highlight=False)


def make_viewer(console, client=None, clock=None, **config):
    return ResultsViewer(
        Config(cmd="ping", target="jsdelivr.com", **config),
        client if client is not None else FakeClient(),
        clock=clock if clock is not None else FakeClock(),
        console=console,
    )


def output_of(console) -> str:
    return console.file.getvalue()


# ====================================================================================
# One-shot
# ====================================================================================


def test_output_waits_until_finished(console):
    clock = FakeClock()
    client = FakeClient(
        measurements={
            MEASUREMENT_ID1: [
                make_measurement(MEASUREMENT_ID1, IP),
                make_measurement(MEASUREMENT_ID1, FIN),
            ]
        }
    )
    viewer = make_viewer(console, client, clock, ci_mode=True, poll_interval=0.5)

    viewer.output(MEASUREMENT_ID1, MeasurementCreate(type="ping", target="jsdelivr.com"))

    out = output_of(console)
    assert client.get_calls == [MEASUREMENT_ID1, MEASUREMENT_ID1]
    assert clock.sleeps == [0.5]
    assert "> Berlin, DE, ASN:3320" in out
    assert "PING jsdelivr.com from Berlin" in out


def test_output_json(console):
    client = FakeClient(measurements={MEASUREMENT_ID1: [make_measurement(MEASUREMENT_ID1)]})
    viewer = make_viewer(console, client, json_output=True)

    viewer.output(MEASUREMENT_ID1, MeasurementCreate(type="ping", target="jsdelivr.com"))

    data = json.loads(output_of(console))
    assert data["id"] == MEASUREMENT_ID1
    assert data["results"][0]["result"]["rawOutput"] == "PING jsdelivr.com from Berlin"


def test_output_latency_and_share(console):
    m = make_measurement(MEASUREMENT_ID1)
    m.results[0].result.stats = PingStats(min=1.0, avg=2.5, max=4.0, total=3, rcv=3)
    client = FakeClient(measurements={MEASUREMENT_ID1: [m]})
    viewer = make_viewer(console, client, ci_mode=True, latency=True, share=True)

    viewer.output(MEASUREMENT_ID1, MeasurementCreate(type="ping", target="jsdelivr.com"))

    out = output_of(console)
    assert "Min: 1.00 ms" in out
    assert "Avg: 2.50 ms" in out
    assert "Max: 4.00 ms" in out
    assert f"https://globalping.io/?measurement={MEASUREMENT_ID1}" in out


def test_latency_not_supported_for_traceroute(console):
    viewer = make_viewer(console)
    with pytest.raises(RenderError):
        viewer.output_latency(make_measurement(MEASUREMENT_ID1, type="traceroute"))


# ====================================================================================
# Infinite
# ====================================================================================


def test_output_infinite_never_prints_a_timing_twice(console):
    viewer = make_viewer(console)

    viewer.output_infinite(make_measurement(MEASUREMENT_ID1, IP, timings=(10.0,)))
    viewer.output_infinite(make_measurement(MEASUREMENT_ID1, IP, timings=(10.0, 20.0)))
    viewer.output_infinite(
        make_measurement(MEASUREMENT_ID1, FIN, timings=(10.0, 20.0, 30.0))
    )

    out = output_of(console)
    assert out.count("time=") == 3
    assert out.count("PING jsdelivr.com (104.16.85.20)") == 1
    assert "icmp_seq=3 ttl=56 time=30.00 ms" in out
    agg = viewer.aggregates["Berlin, DE, ASN:3320"]
    assert (agg.sent, agg.rcv, agg.replies) == (3, 3, 3)


def test_summary_aggregates_across_measurements(console):
    viewer = make_viewer(console)
    viewer.output_infinite(make_measurement(MEASUREMENT_ID1, FIN, timings=(10.0,)))
    viewer.output_infinite(make_measurement(MEASUREMENT_ID2, FIN, timings=(30.0,)))

    viewer.output_summary()

    agg = viewer.aggregates["Berlin, DE, ASN:3320"]
    assert (agg.sent, agg.rcv) == (2, 2)
    assert agg.rtt_avg == pytest.approx(20.0)
    out = output_of(console)
    assert "Summary" in out
    assert "0.00%" in out
    assert "10.00 ms" in out
    assert "20.00 ms" in out
    assert "30.00 ms" in out


def test_summary_without_results_prints_nothing(console):
    viewer = make_viewer(console)
    viewer.output_summary()
    assert output_of(console) == ""


def test_output_infinite_rejects_non_ping(console):
    viewer = make_viewer(console)
    with pytest.raises(RenderError):
        viewer.output_infinite(make_measurement(MEASUREMENT_ID1, type="dns"))


def test_write_failure_is_a_render_error():
    class BrokenFile(io.StringIO):
        def write(self, s):
            raise BrokenPipeError("broken pipe")

    viewer = make_viewer(Console(file=BrokenFile(), width=200))
    with pytest.raises(RenderError, match="broken pipe"):
        viewer.output_infinite(make_measurement(MEASUREMENT_ID1))
