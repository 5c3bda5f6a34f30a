"""
EventStream Timed Operations
============================
"""

import logging
from typing import TYPE_CHECKING, List, Optional, TypeVar

from ..config import resolve_timers
from ..pipeline import Sink
from ..signals import Signal
from ..subscription import SubscriptionContext
from ..timers import TimerHandle, TimerScheduler

if TYPE_CHECKING:
    from ..stream import EventStream

T = TypeVar("T")


class TimedOperationsMixin:
    """Operations that move ticks in time."""

    def delay(
        self, timeout: float, timers: Optional[TimerScheduler] = None
    ) -> "EventStream[T]":
        """
        Re-emit every tick `timeout` seconds later.

        Each tick gets its own one-shot timer, so several can be in flight at
        once. Errors and the end of the stream are delayed too, which keeps
        them ordered after the values that preceded them. Unsubscribing
        cancels every timer that has not fired yet.

        Args:
            timeout: Delay in seconds
            timers: Timer backend; defaults to `get_default_timers()` at
                subscription time
        """
        if timeout < 0:
            raise ValueError(f"delay() timeout must be non-negative, got {timeout}")

        def step(next: Sink, context: SubscriptionContext) -> Sink:
            scheduler = resolve_timers(timers)
            pending: List[TimerHandle] = []

            def cancel_pending() -> None:
                if pending:
                    logging.debug(f"Cancelling {len(pending)} pending delay timer(s)")
                for timer in pending:
                    timer.cancel()
                pending.clear()

            context.add_teardown(cancel_pending)

            def sink(signal: Signal) -> None:
                def fire() -> None:
                    pending.remove(timer)
                    next(signal)

                timer = scheduler.call_later(timeout, fire)
                pending.append(timer)

            return sink

        return self._derive(step, f"delay({timeout})")
