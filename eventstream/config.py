"""
EventStream Configuration - Process-Wide Defaults
=================================================

Time-based combinators and producers accept an explicit `timers` argument.
When it is omitted, the default scheduler configured here is used:

- `get_default_timers()` - lazily creates an `AsyncioTimers` on first use
- `set_default_timers(timers)` - install another backend, e.g. a `VirtualClock`
"""

import logging
from typing import Optional

from .timers import AsyncioTimers, TimerScheduler

_default_timers: Optional[TimerScheduler] = None


def get_default_timers() -> TimerScheduler:
    """Get the process-wide timer scheduler, creating it if needed."""
    global _default_timers
    if _default_timers is None:
        _default_timers = AsyncioTimers()
    return _default_timers


def set_default_timers(timers: TimerScheduler) -> None:
    """
    Install `timers` as the default scheduler for time-based operations.

    Raises:
        TypeError: If `timers` does not provide `call_later` and `now`
    """
    global _default_timers
    if not isinstance(timers, TimerScheduler):
        raise TypeError(
            f"Expected a TimerScheduler with call_later() and now(), got {type(timers).__name__}"
        )
    logging.debug(f"Default timers set to {timers!r}")
    _default_timers = timers


def resolve_timers(timers: Optional[TimerScheduler]) -> TimerScheduler:
    return timers if timers is not None else get_default_timers()


def _reset_default_timers() -> None:
    """Drop the configured default scheduler (for testing)."""
    global _default_timers
    _default_timers = None
