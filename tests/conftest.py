"""
Shared fixtures for phpcore tests.
"""

import pytest

from phpcore import AllocationTracker, BufferSink, Engine


@pytest.fixture
def tracker():
    """A fresh allocation tracker."""
    return AllocationTracker()


@pytest.fixture
def sink():
    """An in-memory output sink."""
    return BufferSink()


@pytest.fixture
def engine(sink, tracker):
    """An initialized engine writing to the in-memory sink."""
    eng = Engine(sink=sink, tracker=tracker)
    assert eng.init()
    yield eng
    eng.cleanup()
