"""Terminal rendering of measurement results (rich)."""

from .viewer import ProbeAggregate, ResultsViewer

__all__ = ["ProbeAggregate", "ResultsViewer"]
