"""Clock backed by the event loop's monotonic time."""

import asyncio
import time


class SystemClock:
    """Real-time Clock implementation."""

    def now(self) -> float:
        return time.monotonic()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)
