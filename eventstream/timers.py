"""
EventStream Timers - One-Shot Timer Backends
============================================

Time-based combinators and producers schedule work through a `TimerScheduler`
instead of talking to an event loop directly. Two backends ship with the
package:

- `AsyncioTimers` - schedules callbacks on the running asyncio event loop
- `VirtualClock` - a manually advanced clock for deterministic tests and
  simulations

Delays are expressed in seconds for both.
"""

import asyncio
import heapq
import itertools
from typing import Callable, List, Optional, Protocol, Tuple, runtime_checkable


@runtime_checkable
class TimerHandle(Protocol):
    """A scheduled callback that can be cancelled before it fires."""

    def cancel(self) -> None: ...


@runtime_checkable
class TimerScheduler(Protocol):
    """Anything able to run a callback once after a delay."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...

    def now(self) -> float: ...


class AsyncioTimers:
    """
    Timer backend on top of an asyncio event loop.

    Without an explicit loop, the loop running at scheduling time is used,
    so streams can be defined anywhere and subscribed from inside a coroutine.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        return asyncio.get_running_loop()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return self._get_loop().call_later(max(delay, 0), callback)

    def now(self) -> float:
        return self._get_loop().time()

    def __repr__(self) -> str:
        return f"AsyncioTimers({self._loop!r})"


class VirtualTimer:
    """Handle returned by `VirtualClock.call_later`."""

    __slots__ = ("deadline", "callback", "cancelled")

    def __init__(self, deadline: float, callback: Callable[[], None]) -> None:
        self.deadline = deadline
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class VirtualClock:
    """
    Deterministic clock that only moves when told to.

    Timers with equal deadlines fire in the order they were scheduled.

    Example:
        ```python
        clock = VirtualClock()
        clock.call_later(5, lambda: print("five"))
        clock.advance(4)   # nothing
        clock.advance(1)   # prints "five"
        ```
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._queue: List[Tuple[float, int, VirtualTimer]] = []
        self._sequence = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> VirtualTimer:
        timer = VirtualTimer(self._now + max(delay, 0), callback)
        heapq.heappush(self._queue, (timer.deadline, next(self._sequence), timer))
        return timer

    @property
    def pending(self) -> int:
        """Number of scheduled timers that have not fired or been cancelled."""
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)

    def advance(self, delta: float) -> None:
        if delta < 0:
            raise ValueError(f"Cannot move a clock backwards (delta={delta})")
        self.advance_to(self._now + delta)

    def advance_to(self, target: float) -> None:
        """Fire every timer due at or before `target`, in deadline order."""
        if target < self._now:
            raise ValueError(
                f"Cannot move a clock backwards (now={self._now}, target={target})"
            )
        while self._queue and self._queue[0][0] <= target:
            deadline, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self._now = deadline
            timer.callback()
        self._now = target

    def __repr__(self) -> str:
        return f"VirtualClock(now={self._now}, pending={self.pending})"
