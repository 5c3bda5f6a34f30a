"""
Shared pytest fixtures and configuration for EventStream tests.
"""

import pytest

from eventstream import Emitter, EventStream, VirtualClock, set_default_timers
from eventstream.config import _reset_default_timers
from tests.utils import CountingProducer, Recorder


@pytest.fixture(autouse=True)
def reset_default_timers():
    """Reset the default timer backend before and after each test."""
    _reset_default_timers()
    yield
    _reset_default_timers()


@pytest.fixture
def clock():
    """Provide a VirtualClock installed as the default timer backend."""
    virtual_clock = VirtualClock()
    set_default_timers(virtual_clock)
    return virtual_clock


@pytest.fixture
def emitter():
    """Provide a manually driven source."""
    return Emitter("source")


@pytest.fixture
def producer():
    """Provide a producer that counts its starts and stops."""
    return CountingProducer()


@pytest.fixture
def source(producer):
    """Provide an EventStream backed by the counting producer."""
    return EventStream(producer, name="source")


@pytest.fixture
def recorder():
    """Provide a fresh Recorder."""
    return Recorder()
