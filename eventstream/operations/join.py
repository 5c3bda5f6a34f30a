"""
EventStream Join Operations - Reading From Two Streams
======================================================

A join starts both streams' producers against one handler that tags each tick
with its `Origin`, then dispatches the tick into that side's own pipeline. Each
side keeps its own transform chain:

    a.map(f).merge(b.map(g))   # f only sees a's values, g only b's

- `merge(other)` - interleave both streams
- `combine_latest(other, combinator)` - combine the latest value of each side
- `sampled_by(other)` - emit this stream's latest value whenever `other` ticks

The end of either side ends the joined stream. When both producers fire on the
same host tick, output order is whatever order they called the handler in.
"""

from typing import TYPE_CHECKING, Any, Callable, Dict, Tuple, TypeVar

from ..pipeline import Sink, emit, on_values
from ..signals import Origin, attempt
from ..subscription import Handler, SubscriptionContext, join_starters

if TYPE_CHECKING:
    from ..stream import EventStream

T = TypeVar("T")
U = TypeVar("U")
R = TypeVar("R")

Sides = Callable[[Sink, SubscriptionContext], Tuple[Sink, Sink]]


class JoinOperationsMixin:
    """Operations combining this stream with another one."""

    def merge(self, other: "EventStream[U]") -> "EventStream[Any]":
        """
        Forward values from both streams as they arrive.

        Example:
            ```python
            labelled = a.map(lambda _: "A").merge(b.map(lambda _: "B"))
            ```
        """

        def sides(next: Sink, context: SubscriptionContext) -> Tuple[Sink, Sink]:
            return next, next

        return self._join(other, sides, "merge")

    def combine_latest(
        self, other: "EventStream[U]", combinator: Callable[[T, U], R]
    ) -> "EventStream[R]":
        """
        Emit `combinator(latest_self, latest_other)` on every tick of either side.

        Nothing is emitted until both streams have produced at least one value.
        Errors raised by `combinator` are reported on the error channel.
        """

        def sides(next: Sink, context: SubscriptionContext) -> Tuple[Sink, Sink]:
            latest: Dict[Origin, Any] = {}

            def side(origin: Origin) -> Sink:
                def on_value(value: Any) -> None:
                    latest[origin] = value
                    if len(latest) == 2:
                        next(
                            attempt(
                                combinator, latest[Origin.LEFT], latest[Origin.RIGHT]
                            )
                        )

                return on_values(next, on_value)

            return side(Origin.LEFT), side(Origin.RIGHT)

        return self._join(other, sides, "combine_latest")

    def sampled_by(self, other: "EventStream[Any]") -> "EventStream[T]":
        """
        Emit this stream's latest value every time `other` ticks.

        Ticks of `other` before this stream has produced anything are ignored,
        and this stream's own ticks never produce output.
        """

        def sides(next: Sink, context: SubscriptionContext) -> Tuple[Sink, Sink]:
            latest: Dict[str, Any] = {}

            def on_sample(value: Any) -> None:
                latest["value"] = value

            def on_sampler(_: Any) -> None:
                if "value" in latest:
                    emit(next, latest["value"])

            return on_values(next, on_sample), on_values(next, on_sampler)

        return self._join(other, sides, "sampled_by")

    def _join(self, other: "EventStream[Any]", sides: Sides, operation: str):
        from ..stream import EventStream

        if not isinstance(other, EventStream):
            raise TypeError(
                f"{operation}() expects an EventStream, got {type(other).__name__}"
            )

        left_pipeline = self.pipeline
        right_pipeline = other.pipeline

        def pipeline(next: Sink, context: SubscriptionContext) -> Handler:
            on_left, on_right = sides(next, context)
            left = left_pipeline(on_left, context)
            right = right_pipeline(on_right, context)

            def handler(origin: Origin, *args: Any) -> None:
                if origin is Origin.LEFT:
                    left(*args)
                else:
                    right(*args)

            return handler

        return EventStream(
            start=join_starters(self.start, other.start),
            pipeline=pipeline,
            name=f"{operation}({self.name}, {other.name})",
        )
