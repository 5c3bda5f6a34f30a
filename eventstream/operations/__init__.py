"""
EventStream Operations Package
==============================

This package contains the combinator mixins that make up `EventStream`.
"""

from .dynamic import DynamicOperationsMixin
from .join import JoinOperationsMixin
from .linear import LinearOperationsMixin
from .operators import OperatorMixin
from .timed import TimedOperationsMixin

__all__ = [
    "DynamicOperationsMixin",
    "JoinOperationsMixin",
    "LinearOperationsMixin",
    "OperatorMixin",
    "TimedOperationsMixin",
]
