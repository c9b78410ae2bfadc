"""Tests for the fan-out sink."""

import pytest

from pzcommon.adapters.writers.in_memory import InMemoryWriter
from pzcommon.adapters.writers.multi import MultiWriter
from pzcommon.core.errors import SinkNotConfiguredError
from pzcommon.core.models import SyslogMessage
from pzcommon.core.ports import SyslogWriterPort


class _BrokenWriter:
    def __init__(self) -> None:
        self.closed = False

    def write(self, message: SyslogMessage) -> None:
        raise SinkNotConfiguredError("broken")

    def close(self) -> None:
        self.closed = True
        raise OSError("close failed")


@pytest.mark.storage
class TestMultiWriter:
    """Tests for MultiWriter adapter."""

    def test_implements_writer_port(self) -> None:
        assert isinstance(MultiWriter([]), SyslogWriterPort)

    def test_every_sink_gets_the_record(self) -> None:
        first, second = InMemoryWriter(), InMemoryWriter()
        message = SyslogMessage(message="x")

        MultiWriter([first, second]).write(message)

        assert first.read(1) == [message]
        assert second.read(1) == [message]

    def test_first_failure_stops_fan_out(self) -> None:
        before, after = InMemoryWriter(), InMemoryWriter()
        writer = MultiWriter([before, _BrokenWriter(), after])

        with pytest.raises(SinkNotConfiguredError, match="broken"):
            writer.write(SyslogMessage())

        assert len(before) == 1
        assert len(after) == 0

    def test_close_closes_all_then_raises(self) -> None:
        broken = _BrokenWriter()
        other = _BrokenWriter()

        with pytest.raises(OSError, match="close failed"):
            MultiWriter([broken, other]).close()

        assert broken.closed
        assert other.closed
