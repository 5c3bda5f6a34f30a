"""
EventStream - Lazy Push-Based Event Streams
===========================================

An `EventStream` describes an event that recurs over time. It is an immutable
pairing of:

- a starter - `start(handler) -> stop`, which begins producing ticks
- a pipeline - the per-value logic every combinator adds between the producer
  and the consumer

Building streams never does any work. Only `subscribe` starts the producer,
and every `subscribe` call gets its own independent run with its own state.

Example:
    ```python
    from eventstream import EventStream

    def clicks(handler):
        button.add_listener(handler)
        return lambda: button.remove_listener(handler)

    double_clicks = (
        EventStream(clicks)
        .map(lambda event: event.timestamp)
        .diff(0, lambda previous, current: current - previous)
        .filter(lambda gap: gap < 0.3)
    )

    subscription = double_clicks.subscribe(print)
    ...
    subscription()  # stop listening
    ```
"""

import logging
from typing import Any, Callable, Generic, Optional, TypeVar

from .operations import (
    DynamicOperationsMixin,
    JoinOperationsMixin,
    LinearOperationsMixin,
    OperatorMixin,
    TimedOperationsMixin,
)
from .pipeline import Pipeline, Step, compose, identity_pipeline
from .signals import Signal, Value
from .subscription import (
    Handler,
    Inlet,
    Producer,
    Start,
    Stop,
    Subscription,
    SubscriptionContext,
)

T = TypeVar("T")


def _producer_starter(producer: Producer) -> Start:
    """Adapt a producer of raw values to a starter that emits signals."""

    def start(handler: Handler) -> Stop:
        stop = producer(lambda value: handler(Value(value)))
        if not callable(stop):
            raise TypeError(
                f"Producer {producer!r} must return a stop function, got {type(stop).__name__}"
            )
        return stop

    return start


class EventStream(
    LinearOperationsMixin,
    TimedOperationsMixin,
    JoinOperationsMixin,
    DynamicOperationsMixin,
    OperatorMixin,
    Generic[T],
):
    """
    A lazy stream of values over time.

    Args:
        producer: A function `(handler) -> stop` pushing raw values into
            `handler` once started
        start: A starter pushing signals instead of raw values; used by
            combinators and built-in producers. Exactly one of `producer` and
            `start` must be given.
        pipeline: Per-value logic between starter and consumer; identity when
            omitted
        name: Label used in reprs and log messages

    Raises:
        ValueError: If neither or both of `producer` and `start` are given
        TypeError: If the producer is not callable
    """

    def __init__(
        self,
        producer: Optional[Producer] = None,
        *,
        start: Optional[Start] = None,
        pipeline: Optional[Pipeline] = None,
        name: Optional[str] = None,
    ) -> None:
        if (producer is None) == (start is None):
            raise ValueError("EventStream needs exactly one of producer or start")

        if producer is not None:
            if not callable(producer):
                raise TypeError(
                    f"Producer must be callable, got {type(producer).__name__}"
                )
            start = _producer_starter(producer)
            name = name or getattr(producer, "__name__", None)

        self._start = start
        self._pipeline = pipeline or identity_pipeline
        self._name = name or "<stream>"

    @property
    def name(self) -> str:
        return self._name

    @property
    def start(self) -> Start:
        return self._start

    @property
    def pipeline(self) -> Pipeline:
        return self._pipeline

    def decompose(self, getter: Callable[[Start, Pipeline], Any]) -> Any:
        """Hand this stream's starter and pipeline to `getter`."""
        return getter(self._start, self._pipeline)

    def _derive(self, step: Step, operation: str) -> "EventStream[Any]":
        return EventStream(
            start=self._start,
            pipeline=compose(self._pipeline, step),
            name=f"{self._name}.{operation}",
        )

    def subscribe(
        self,
        on_next: Callable[[T], Any],
        on_end: Optional[Callable[[], Any]] = None,
        on_error: Optional[Callable[[Exception], Any]] = None,
    ) -> Subscription:
        """
        Start the stream and deliver its values.

        Args:
            on_next: Called with every value
            on_end: Called once when the stream ends on its own
            on_error: Called with every error raised by a transform; the stream
                keeps running afterwards. Without it, errors are re-raised into
                whatever code pushed the offending value.

        Returns:
            A `Subscription`; call it to unsubscribe.
        """
        if not callable(on_next):
            raise TypeError(f"on_next must be callable, got {type(on_next).__name__}")

        context = SubscriptionContext(self._name)
        subscription = Subscription(context)

        def terminal(signal: Signal) -> None:
            if signal.is_value:
                if not context.closed:
                    on_next(signal.value)
            elif signal.is_end:
                if context.closed:
                    return
                try:
                    context.close()
                finally:
                    if on_end is not None:
                        on_end()
            elif on_error is not None:
                on_error(signal.error)
            else:
                logging.error(f"Unhandled error in {self._name}: {signal.error!r}")
                raise signal.error

        handler = self._pipeline(terminal, context)
        if context.closed:
            # Ended while the pipeline was being built, e.g. take(0)
            return subscription

        logging.debug(f"Subscribing to {self._name}")
        try:
            stop = self._start(Inlet(handler, context))
        except Exception:
            context.close()
            raise
        context.attach(stop)
        return subscription

    def __repr__(self) -> str:
        return f"EventStream({self._name!r})"
