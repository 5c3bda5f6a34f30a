"""
EventStream Pipelines - Composing Per-Value Logic
=================================================

A pipeline sits between a producer and its consumer. Given the next stage
(a sink that accepts signals) and the subscription context, it returns the
handler to hand to the stream's starter:

    pipeline(next, context) -> handler

Every combinator wraps the source pipeline with one more step:

    composed(next, context) = source_pipeline(step(next, context), context)

Steps are invoked once per `subscribe`, so state a step creates (an
accumulator, a timer set, a child subscription list) belongs to exactly one
subscription. Building a chain of combinators allocates nothing per value.
"""

from typing import Callable

from .signals import Signal, Value
from .subscription import Handler, SubscriptionContext

Sink = Callable[[Signal], None]
Step = Callable[[Sink, SubscriptionContext], Sink]
Pipeline = Callable[[Sink, SubscriptionContext], Handler]


def identity_pipeline(next: Sink, context: SubscriptionContext) -> Handler:
    return next


def compose(pipeline: Pipeline, step: Step) -> Pipeline:
    """Append `step` after everything `pipeline` already does."""

    def composed(next: Sink, context: SubscriptionContext) -> Handler:
        return pipeline(step(next, context), context)

    return composed


def on_values(next: Sink, on_value: Callable[[object], None]) -> Sink:
    """
    Build a sink that hands `Value` payloads to `on_value`.

    `END` and `Error` signals skip `on_value` and go straight to `next`, which
    is how an error raised on one tick bypasses every downstream transform.
    """

    def sink(signal: Signal) -> None:
        if signal.is_value:
            on_value(signal.value)
        else:
            next(signal)

    return sink


def value_step(func: Callable[[Sink, object], None]) -> Step:
    """Turn a stateless `func(next, value)` into a step."""

    def step(next: Sink, context: SubscriptionContext) -> Sink:
        return on_values(next, lambda value: func(next, value))

    return step


def emit(next: Sink, value: object) -> None:
    """Forward a plain value downstream."""
    next(Value(value))
