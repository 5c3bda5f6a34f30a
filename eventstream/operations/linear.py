"""
EventStream Linear Operations - Single-Input Transforms
=======================================================

Each operation returns a new stream that shares its source's starter and adds
one step to its pipeline:

- `map(func)` - transform each value
- `filter(predicate)` - keep values for which the predicate is truthy
- `scan(seed, func)` - running accumulation, emits every intermediate result
- `diff(seed, func)` - combine each value with the previous raw value
- `take(count)` - first `count` values, then end
- `take_until(predicate_or_stream)` - end on a predicate or on another stream
- `take_while(predicate)`, `skip(count)`, `tap(func)`

Exceptions raised by user functions are captured and sent down the error
channel; the offending tick produces no value and the stream keeps running.
"""

from typing import TYPE_CHECKING, Any, Callable, TypeVar, Union

from ..pipeline import Sink, emit, on_values, value_step
from ..signals import END, attempt
from ..subscription import SubscriptionContext

if TYPE_CHECKING:
    from ..stream import EventStream

T = TypeVar("T")
U = TypeVar("U")


class LinearOperationsMixin:
    """Single-input, single-output operations for `EventStream`."""

    def map(self, func: Callable[[T], U]) -> "EventStream[U]":
        """
        Transform every value with `func`.

        Example:
            ```python
            doubled = numbers.map(lambda x: x * 2)
            ```
        """

        def step(next: Sink, value: Any) -> None:
            next(attempt(func, value))

        return self._derive(value_step(step), "map")

    def filter(self, predicate: Callable[[T], Any]) -> "EventStream[T]":
        """Forward only the values for which `predicate` is truthy."""

        def step(next: Sink, value: Any) -> None:
            result = attempt(predicate, value)
            if result.is_error:
                next(result)
            elif result.value:
                emit(next, value)

        return self._derive(value_step(step), "filter")

    def scan(self, seed: U, func: Callable[[U, T], U]) -> "EventStream[U]":
        """
        Fold values into an accumulator and emit it after every tick.

        The accumulator starts from `seed` for each subscription. If `func`
        raises, the error is reported and the accumulator stays where it was.

        Example:
            ```python
            totals = ones.scan(0, lambda total, x: total + x)  # 1, 2, 3, ...
            ```
        """

        def step(next: Sink, context: SubscriptionContext) -> Sink:
            accumulator = seed

            def on_value(value: Any) -> None:
                nonlocal accumulator
                result = attempt(func, accumulator, value)
                if result.is_value:
                    accumulator = result.value
                next(result)

            return on_values(next, on_value)

        return self._derive(step, "scan")

    def diff(self, seed: T, func: Callable[[T, T], U]) -> "EventStream[U]":
        """
        Emit `func(previous, current)` for every value.

        `previous` starts as `seed` and always becomes the latest raw value,
        whether or not `func` succeeded on it.

        Example:
            ```python
            deltas = readings.diff(0, lambda a, b: b - a)  # 2, 5, 9 -> 2, 3, 4
            ```
        """

        def step(next: Sink, context: SubscriptionContext) -> Sink:
            previous = seed

            def on_value(value: Any) -> None:
                nonlocal previous
                result = attempt(func, previous, value)
                previous = value
                next(result)

            return on_values(next, on_value)

        return self._derive(step, "diff")

    def take(self, count: int) -> "EventStream[T]":
        """
        Forward the first `count` values, ending the stream on the last one.

        With `count <= 0` the stream ends as soon as it is subscribed and the
        producer is never started.
        """

        def step(next: Sink, context: SubscriptionContext) -> Sink:
            remaining = count
            if remaining <= 0:
                next(END)

            def on_value(value: Any) -> None:
                nonlocal remaining
                if remaining <= 0:
                    return
                remaining -= 1
                emit(next, value)
                if remaining == 0:
                    next(END)

            return on_values(next, on_value)

        return self._derive(step, f"take({count})")

    def take_until(
        self, until: Union[Callable[[T], Any], "EventStream[Any]"]
    ) -> "EventStream[T]":
        """
        Stop forwarding values once a condition is met.

        Args:
            until: Either a predicate, in which case the first value for which
                it is truthy ends the stream (and is not forwarded), or another
                stream, in which case its first tick or its own end ends this
                stream.
        """
        from ..stream import EventStream

        if isinstance(until, EventStream):
            return self.merge(until._as_terminator())

        if not callable(until):
            raise TypeError(
                f"take_until() expects a predicate or an EventStream, got {type(until).__name__}"
            )

        def step(next: Sink, value: Any) -> None:
            result = attempt(until, value)
            if result.is_error:
                next(result)
            elif result.value:
                next(END)
            else:
                emit(next, value)

        return self._derive(value_step(step), "take_until")

    def take_while(self, predicate: Callable[[T], Any]) -> "EventStream[T]":
        """Forward values while `predicate` holds, end on the first that fails it."""
        return self.take_until(lambda value: not predicate(value))

    def skip(self, count: int) -> "EventStream[T]":
        """Drop the first `count` values."""

        def step(next: Sink, context: SubscriptionContext) -> Sink:
            remaining = count

            def on_value(value: Any) -> None:
                nonlocal remaining
                if remaining > 0:
                    remaining -= 1
                    return
                emit(next, value)

            return on_values(next, on_value)

        return self._derive(step, f"skip({count})")

    def tap(self, func: Callable[[T], Any]) -> "EventStream[T]":
        """Call `func` for its side effect and forward the value unchanged."""

        def step(next: Sink, value: Any) -> None:
            result = attempt(func, value)
            if result.is_error:
                next(result)
            else:
                emit(next, value)

        return self._derive(value_step(step), "tap")

    def _as_terminator(self) -> "EventStream[Any]":
        """This stream with every value turned into the end of the stream."""

        def step(next: Sink, value: Any) -> None:
            next(END)

        return self._derive(value_step(step), "terminator")
