"""Clock interface."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Protocol for the time source behind every session timer.

    Implementations can use the event loop (production) or a manually
    advanced clock (tests).
    """

    def now(self) -> float:
        """Return a monotonic timestamp in seconds."""
        ...

    async def sleep(self, seconds: float) -> None:
        """Suspend the calling task for ``seconds``.

        Cancelling the task cancels the pending sleep.
        """
        ...
