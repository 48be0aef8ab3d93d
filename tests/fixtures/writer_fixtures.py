"""Writer and clock fixtures for DFXML writer tests."""

import io
from typing import Iterable, List

import pytest

from dfxml_writer.timing import Timeval
from dfxml_writer.writer import DFXMLWriter


class FakeClock:
    """Clock returning scripted instants, repeating the last one when exhausted."""

    def __init__(self, instants: Iterable[Timeval]):
        self.instants: List[Timeval] = list(instants)
        self.calls = 0

    def __call__(self) -> Timeval:
        index = min(self.calls, len(self.instants) - 1)
        self.calls += 1
        return self.instants[index]


@pytest.fixture
def fake_clock():
    """Factory building a FakeClock from (seconds, microseconds) pairs."""
    def _make(*instants) -> FakeClock:
        return FakeClock(Timeval(*instant) for instant in instants)
    return _make


@pytest.fixture
def string_writer():
    """Provide a DFXMLWriter bound to an in-memory stream.

    Returns:
        Tuple of (writer, stream)
    """
    stream = io.StringIO()
    writer = DFXMLWriter(stream, clock=lambda: Timeval(100, 0))
    return writer, stream
