"""
EventStream Operators - Operator Overloading for Streams
========================================================

Shorthand syntax for the most common combinators:

- `stream >> func` - `stream.map(func)`
- `a | b` - `a.merge(b)`
- `a + b` - `a.combine_latest(b, ...)` emitting `(latest_a, latest_b)` tuples
"""

from typing import TYPE_CHECKING, Any, Callable, Tuple

if TYPE_CHECKING:
    from ..stream import EventStream


def _pair(left: Any, right: Any) -> Tuple[Any, Any]:
    return left, right


class OperatorMixin:
    """Operator overloads delegating to the named combinators."""

    def __rshift__(self, func: Callable) -> "EventStream":
        """
        Transform values using the >> operator.

        Example:
            ```python
            celsius = readings >> (lambda f: (f - 32) * 5 / 9)
            ```
        """
        return self.map(func)

    def __or__(self, other: "EventStream") -> "EventStream":
        """Merge two streams using the | operator."""
        return self.merge(other)

    def __add__(self, other: "EventStream") -> "EventStream":
        """
        Pair the latest values of two streams using the + operator.

        Emits nothing until both streams have ticked, then a tuple
        `(latest_self, latest_other)` on every tick of either side.
        """
        return self.combine_latest(other, _pair)
