"""Message types exchanged with the Globalping measurement API.

All messages are plain dataclasses with `mashumaro` (de)serialization. Field
names are snake_case in Python and camelCase on the wire; `None` fields are
left out of request bodies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from mashumaro import DataClassDictMixin
from mashumaro.config import TO_DICT_ADD_OMIT_NONE_FLAG, BaseConfig


class MeasurementStatus(str, Enum):
    IN_PROGRESS = "in-progress"
    FINISHED = "finished"
    FAILED = "failed"
    OFFLINE = "offline"

    @property
    def terminal(self) -> bool:
        return self is not MeasurementStatus.IN_PROGRESS


@dataclass
class Message(DataClassDictMixin):
    """Base class for all API messages."""

    class Config(BaseConfig):
        serialize_by_alias = True
        code_generation_options = [TO_DICT_ADD_OMIT_NONE_FLAG]

    def to_body(self) -> dict[str, Any]:
        """Serialize for a request body (camelCase keys, no `None` values)."""
        return self.to_dict(omit_none=True)


# ----------------------------------------------------------------------------------
# Requests
# ----------------------------------------------------------------------------------


@dataclass
class Locations(Message):
    magic: str = ""


@dataclass
class MeasurementOptions(Message):
    packets: Optional[int] = None
    protocol: Optional[str] = None
    port: Optional[int] = None
    query: Optional[dict[str, str]] = None
    resolver: Optional[str] = None
    trace: Optional[bool] = None


@dataclass
class MeasurementCreate(Message):
    type: str
    target: str
    limit: int = 1
    locations: list[Locations] = field(default_factory=list)
    in_progress_updates: bool = field(
        default=False, metadata={"alias": "inProgressUpdates"}
    )
    options: Optional[MeasurementOptions] = None


@dataclass
class MeasurementCreateResponse(Message):
    id: str
    probes_count: int = field(default=0, metadata={"alias": "probesCount"})


# ----------------------------------------------------------------------------------
# Results
# ----------------------------------------------------------------------------------


@dataclass
class ProbeDetails(Message):
    continent: str = ""
    region: str = ""
    country: str = ""
    state: Optional[str] = None
    city: str = ""
    asn: int = 0
    network: str = ""
    tags: list[str] = field(default_factory=list)
    resolvers: list[str] = field(default_factory=list)

    def location_label(self) -> str:
        """`city, country, (state,) ASN:n, network` as shown in result headers."""
        parts = [self.city, self.country]
        if self.state:
            parts.append(self.state)
        parts.append(f"ASN:{self.asn}")
        parts.append(self.network)
        return ", ".join(p for p in parts if p)


@dataclass
class PingTiming(Message):
    rtt: float = 0.0
    ttl: int = 0


@dataclass
class PingStats(Message):
    min: Optional[float] = None
    avg: Optional[float] = None
    max: Optional[float] = None
    total: int = 0
    rcv: int = 0
    drop: int = 0
    loss: float = 0.0


@dataclass
class DNSTimings(Message):
    total: Optional[float] = None


@dataclass
class ProbeResult(Message):
    status: MeasurementStatus = MeasurementStatus.IN_PROGRESS
    raw_output: str = field(default="", metadata={"alias": "rawOutput"})
    resolved_address: Optional[str] = field(
        default=None, metadata={"alias": "resolvedAddress"}
    )
    resolved_hostname: Optional[str] = field(
        default=None, metadata={"alias": "resolvedHostname"}
    )
    # ping timings are a list of per-packet entries, dns timings a single object
    timings: Any = None
    stats: Optional[PingStats] = None

    def ping_timings(self) -> list[PingTiming]:
        if not isinstance(self.timings, list):
            return []
        return [PingTiming.from_dict(t) for t in self.timings]

    def dns_total(self) -> Optional[float]:
        if isinstance(self.timings, dict):
            return DNSTimings.from_dict(self.timings).total
        return None


@dataclass
class ProbeMeasurement(Message):
    probe: ProbeDetails = field(default_factory=ProbeDetails)
    result: ProbeResult = field(default_factory=ProbeResult)


@dataclass
class Measurement(Message):
    id: str
    type: str = ""
    status: MeasurementStatus = MeasurementStatus.IN_PROGRESS
    created_at: str = field(default="", metadata={"alias": "createdAt"})
    updated_at: str = field(default="", metadata={"alias": "updatedAt"})
    target: str = ""
    probes_count: int = field(default=0, metadata={"alias": "probesCount"})
    results: list[ProbeMeasurement] = field(default_factory=list)


@dataclass
class APIErrorBody(Message):
    type: str = ""
    message: str = ""
    params: dict[str, str] = field(default_factory=dict)
