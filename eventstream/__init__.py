"""
EventStream - Lazy Reactive Event Streams
=========================================

A minimal reactive-stream library: an `EventStream` represents an event that
recurs over time, and a closed set of combinators derives new streams from
existing ones without doing any work until someone subscribes.
"""

from .config import get_default_timers, set_default_timers
from .errors import EventStreamError, TeardownError
from .producers import Emitter, empty, from_iterable, interval, later, never
from .signals import END, End, Error, Origin, Signal, Value, attempt
from .stream import EventStream
from .subscription import Inlet, Subscription, SubscriptionContext, join_starters, once
from .timers import AsyncioTimers, TimerHandle, TimerScheduler, VirtualClock

__version__ = "0.1.0"

__all__ = [
    # Core
    "EventStream",
    "Subscription",
    "SubscriptionContext",
    # Producers
    "Emitter",
    "empty",
    "from_iterable",
    "interval",
    "later",
    "never",
    # Signals
    "Signal",
    "Value",
    "Error",
    "End",
    "END",
    "Origin",
    "attempt",
    # Subscription helpers
    "Inlet",
    "once",
    "join_starters",
    # Timers and configuration
    "TimerHandle",
    "TimerScheduler",
    "AsyncioTimers",
    "VirtualClock",
    "get_default_timers",
    "set_default_timers",
    # Exceptions
    "EventStreamError",
    "TeardownError",
]
