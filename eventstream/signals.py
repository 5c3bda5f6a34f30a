"""
EventStream Signals - Tagged Values Flowing Through a Pipeline
==============================================================

Every stage of a composed pipeline receives a `Signal` rather than a bare value:

- `Value(value)` - an ordinary tick carrying a payload
- `END` - the stream is exhausted, no more values will follow
- `Error(error)` - a transform failed on this tick; the stream keeps going

Join combinators tag each tick with an `Origin` so that the joined pipeline can
dispatch it into the correct side's transform chain.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, TypeVar

T = TypeVar("T")


class Origin(Enum):
    """Which side of a join a tick came from."""

    LEFT = "left"
    RIGHT = "right"


class Signal:
    """Base class for everything that travels through a pipeline."""

    __slots__ = ()

    is_value = False
    is_end = False
    is_error = False


@dataclass(frozen=True)
class Value(Signal, Generic[T]):
    """A regular tick."""

    value: T

    is_value = True


@dataclass(frozen=True)
class Error(Signal):
    """A failure captured while processing a single tick."""

    error: Exception

    is_error = True


class End(Signal):
    """Stream exhaustion. Use the `END` singleton."""

    _instance = None

    is_end = True

    def __new__(cls) -> "End":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "END"


END = End()


def attempt(func: Callable[..., T], *args: Any) -> Signal:
    """
    Call a user-supplied function and capture its outcome as a signal.

    Args:
        func: The transform, predicate or accumulator to run
        *args: Arguments forwarded to `func`

    Returns:
        `Value(result)` on success, `Error(exc)` if `func` raised

    Example:
        ```python
        attempt(int, "42")    # Value(value=42)
        attempt(int, "nope")  # Error(error=ValueError(...))
        ```
    """
    try:
        return Value(func(*args))
    except Exception as error:
        return Error(error)
