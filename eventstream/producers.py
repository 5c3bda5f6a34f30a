"""
EventStream Producers - Ready-Made Sources
==========================================

Factories for common sources. Each returns an `EventStream`; nothing starts
until the stream is subscribed.

- `from_iterable(values)` - push every item synchronously, then end
- `interval(period)` - tick 0, 1, 2, ... every `period` seconds
- `later(timeout, value)` - a single value after `timeout` seconds, then end
- `never()` / `empty()` - no values; `empty()` ends immediately
- `Emitter` - push values by hand, e.g. from a callback-based API
"""

import logging
from typing import Any, Callable, Iterable, List, Optional, TypeVar

from .config import resolve_timers
from .signals import END, Error, Value
from .stream import EventStream
from .subscription import Handler, Stop
from .timers import TimerHandle, TimerScheduler

T = TypeVar("T")


def _noop() -> None:
    pass


def from_iterable(values: Iterable[T]) -> EventStream[T]:
    """
    Emit every item of `values` synchronously when subscribed, then end.

    Items are pulled from `values` on each subscription, so pass a re-iterable
    collection if the stream will be subscribed more than once. Since all
    values are pushed before `subscribe` returns, `values` must be finite.
    """

    def start(handler: Handler) -> Stop:
        for value in values:
            handler(Value(value))
        handler(END)
        return _noop

    return EventStream(start=start, name="from_iterable")


def interval(
    period: float, timers: Optional[TimerScheduler] = None
) -> EventStream[int]:
    """
    Emit an increasing tick count every `period` seconds.

    Raises:
        ValueError: If `period` is not positive
    """
    if period <= 0:
        raise ValueError(f"interval() period must be positive, got {period}")

    def producer(handler: Callable[[int], None]) -> Stop:
        scheduler = resolve_timers(timers)
        count = 0
        timer: Optional[TimerHandle] = None

        def tick() -> None:
            nonlocal count, timer
            timer = scheduler.call_later(period, tick)
            value = count
            count += 1
            handler(value)

        def stop() -> None:
            if timer is not None:
                timer.cancel()

        timer = scheduler.call_later(period, tick)
        return stop

    return EventStream(producer, name=f"interval({period})")


def later(
    timeout: float, value: T, timers: Optional[TimerScheduler] = None
) -> EventStream[T]:
    """Emit `value` once after `timeout` seconds, then end."""

    def start(handler: Handler) -> Stop:
        scheduler = resolve_timers(timers)

        def fire() -> None:
            handler(Value(value))
            handler(END)

        return scheduler.call_later(timeout, fire).cancel

    return EventStream(start=start, name=f"later({timeout})")


def never() -> EventStream[Any]:
    """A stream that never emits and never ends."""
    return EventStream(lambda handler: _noop, name="never")


def empty() -> EventStream[Any]:
    """A stream that ends as soon as it is subscribed."""

    def start(handler: Handler) -> Stop:
        handler(END)
        return _noop

    return EventStream(start=start, name="empty")


class Emitter:
    """
    A manually driven source.

    Every subscription to `stream` registers a listener; `emit`, `error` and
    `end` push to all current listeners.

    Example:
        ```python
        emitter = Emitter("prices")
        emitter.stream.map(round).subscribe(print)
        emitter.emit(9.99)  # prints 10
        ```
    """

    def __init__(self, name: str = "emitter") -> None:
        self._name = name
        self._listeners: List[Handler] = []
        self.start_count = 0
        self.stop_count = 0

    @property
    def stream(self) -> EventStream[Any]:
        return EventStream(start=self._start, name=self._name)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def _start(self, handler: Handler) -> Stop:
        self._listeners.append(handler)
        self.start_count += 1

        def stop() -> None:
            self.stop_count += 1
            self._listeners.remove(handler)

        return stop

    def _push(self, signal: Any) -> None:
        for listener in list(self._listeners):
            listener(signal)

    def emit(self, value: Any) -> None:
        self._push(Value(value))

    def error(self, error: Exception) -> None:
        self._push(Error(error))

    def end(self) -> None:
        logging.debug(f"Ending emitter {self._name}")
        self._push(END)

    def __repr__(self) -> str:
        return f"Emitter({self._name!r}, listeners={self.listener_count})"
