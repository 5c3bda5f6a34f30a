"""
EventStream Exceptions
======================
"""

from typing import List


class EventStreamError(Exception):
    """Base class for errors raised by the eventstream engine itself."""


class TeardownError(EventStreamError):
    """
    Raised when one or more stop functions fail during a single teardown.

    Every stop function still runs; the failures are collected on `errors`
    and the first one is chained as the cause.
    """

    def __init__(self, errors: List[Exception]) -> None:
        self.errors = list(errors)
        super().__init__(
            f"{len(self.errors)} error(s) during teardown: "
            + "; ".join(repr(error) for error in self.errors)
        )
