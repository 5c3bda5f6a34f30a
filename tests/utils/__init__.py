"""
Test utilities for EventStream.

This package contains shared testing helpers for recording what a
subscription receives and for observing producer lifecycles.
"""

from .recorder import CountingProducer, Recorder

__all__ = [
    "CountingProducer",
    "Recorder",
]
