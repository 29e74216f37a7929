"""Time source used by the session engine and the viewer."""

import asyncio
import time
from datetime import datetime, timezone


class SystemClock:
    """Real clock: monotonic seconds for intervals, UTC datetimes for stamps."""

    def now(self) -> float:
        return time.monotonic()

    def utcnow(self) -> datetime:
        return datetime.now(timezone.utc)

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)

    def sleep_sync(self, seconds: float) -> None:
        time.sleep(seconds)
