"""
EventStream Subscriptions - Starting and Stopping Producers
===========================================================

A producer is any function `(handler) -> stop`. It begins pushing values into
`handler` once called and releases its resource (timer, listener, socket) when
`stop` is called.

This module guarantees the teardown half of that contract:

- `once` makes any stop function idempotent
- `SubscriptionContext` holds the state of one `subscribe` call and tears it
  down exactly once, whichever path (external unsubscribe, stream end, or a
  `take` limit) gets there first
- `Inlet` guards the entry of a subscription against signals after close
- `join_starters` runs two producers side by side for the join combinators
"""

import logging
from functools import partial
from typing import Any, Callable, Iterable, List, Optional

from .errors import TeardownError
from .signals import Origin

Handler = Callable[..., None]
Stop = Callable[[], None]
Start = Callable[[Handler], Stop]
Producer = Callable[[Callable[[Any], None]], Stop]


def once(func: Stop) -> Stop:
    """Wrap `func` so only the first call has any effect."""
    called = False

    def wrapper() -> None:
        nonlocal called
        if called:
            return
        called = True
        func()

    return wrapper


def run_all(callbacks: Iterable[Stop]) -> None:
    """
    Run every callback even if some of them raise.

    Raises:
        TeardownError: If at least one callback failed
    """
    errors: List[Exception] = []
    for callback in callbacks:
        try:
            callback()
        except Exception as error:
            errors.append(error)
    if errors:
        raise TeardownError(errors) from errors[0]


class SubscriptionContext:
    """
    Per-subscription state: the producer's stop function plus the teardowns
    registered by combinators while the pipeline was being built.

    A fresh context is created for every `subscribe` call, so nothing here is
    ever shared between two subscribers of the same stream.
    """

    def __init__(self, name: str = "<stream>") -> None:
        self.name = name
        self._stop: Optional[Stop] = None
        self._teardowns: List[Stop] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def add_teardown(self, teardown: Stop) -> None:
        """Register a cleanup to run before the producer is stopped."""
        if self._closed:
            teardown()
            return
        self._teardowns.append(teardown)

    def attach(self, stop: Stop) -> None:
        """
        Record the stop function returned by `start`.

        A synchronous producer may end the stream before `start` returns; in
        that case the producer is stopped right away.
        """
        if self._closed:
            stop()
            return
        self._stop = stop

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        logging.debug(f"Closing subscription to {self.name}")

        # Combinator resources first, then the producer
        callbacks = self._teardowns
        if self._stop is not None:
            callbacks.append(self._stop)
        self._teardowns = []
        self._stop = None
        run_all(callbacks)


class Subscription:
    """
    The live result of one `subscribe` call.

    Calling the subscription (or `unsubscribe()`) stops the producer and every
    resource the pipeline holds. Repeated calls are no-ops.

    Example:
        ```python
        subscription = stream.subscribe(print)
        ...
        subscription()  # unsubscribe
        ```
    """

    def __init__(self, context: SubscriptionContext) -> None:
        self._context = context

    @property
    def closed(self) -> bool:
        return self._context.closed

    def unsubscribe(self) -> None:
        self._context.close()

    def __call__(self) -> None:
        self.unsubscribe()

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.unsubscribe()
        return False

    def __repr__(self) -> str:
        state = "closed" if self.closed else "active"
        return f"Subscription({self._context.name!r}, {state})"


class Inlet:
    """
    The handler a subscription hands to its starter.

    Signals arriving after the subscription closed are dropped. Starters that
    launch more than one producer check `closed` between launches.
    """

    def __init__(self, handler: Handler, context: SubscriptionContext) -> None:
        self._handler = handler
        self._context = context

    @property
    def closed(self) -> bool:
        return self._context.closed

    def __call__(self, *args: Any) -> None:
        if not self._context.closed:
            self._handler(*args)


def _is_closed(handler: Handler) -> bool:
    return getattr(handler, "closed", False)


class _SideHandler:
    """Tags every signal of one join side with its `Origin`."""

    def __init__(self, handler: Handler, origin: Origin) -> None:
        self._handler = handler
        self._origin = origin

    @property
    def closed(self) -> bool:
        return _is_closed(self._handler)

    def __call__(self, *args: Any) -> None:
        self._handler(self._origin, *args)


def join_starters(left: Start, right: Start) -> Start:
    """
    Combine two starters into one whose handler receives `(origin, signal)`.

    The left side is started first. If it ends the subscription while starting,
    the right side is never started. The returned stop function stops both
    sides, each exactly once, even if one of them raises.
    """

    def start(handler: Handler) -> Stop:
        stop_left = once(left(_SideHandler(handler, Origin.LEFT)))
        if _is_closed(handler):
            return stop_left
        try:
            stop_right = once(right(_SideHandler(handler, Origin.RIGHT)))
        except Exception:
            stop_left()
            raise
        return once(partial(run_all, (stop_left, stop_right)))

    return start
