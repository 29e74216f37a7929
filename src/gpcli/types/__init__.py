"""
API message types, configuration, collaborator protocols and errors.

Examples
--------
Building a measurement request:
```python
from gpcli.types import Locations, MeasurementCreate, MeasurementOptions
opts = MeasurementCreate(
    type="ping",
    target="jsdelivr.com",
    limit=2,
    locations=[Locations(magic="New York")],
    options=MeasurementOptions(packets=3),
)
body = opts.to_body()  # camelCase dict, None fields dropped
```

See Also
--------
gpcli.api : HTTP client producing these messages
gpcli.session : Engine consuming them
"""

from .config import Config
from .errors import (
    ClientError,
    GPCliError,
    HistoryError,
    IndexOutOfRange,
    InvalidIndex,
    NoPreviousMeasurements,
    RenderError,
    ValidationError,
)
from .messages import (
    APIErrorBody,
    Locations,
    Measurement,
    MeasurementCreate,
    MeasurementCreateResponse,
    MeasurementOptions,
    MeasurementStatus,
    PingStats,
    PingTiming,
    ProbeDetails,
    ProbeMeasurement,
    ProbeResult,
)
from .protocols import Clock, MeasurementClient, Renderer, SessionStoreProtocol

__all__ = [
    "APIErrorBody",
    "ClientError",
    "Clock",
    "Config",
    "GPCliError",
    "HistoryError",
    "IndexOutOfRange",
    "InvalidIndex",
    "Locations",
    "Measurement",
    "MeasurementClient",
    "MeasurementCreate",
    "MeasurementCreateResponse",
    "MeasurementOptions",
    "MeasurementStatus",
    "NoPreviousMeasurements",
    "PingStats",
    "PingTiming",
    "ProbeDetails",
    "ProbeMeasurement",
    "ProbeResult",
    "RenderError",
    "Renderer",
    "SessionStoreProtocol",
    "ValidationError",
]
