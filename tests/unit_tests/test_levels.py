import logging

import pytest

from conlog.levels import Channel, Level, channel_for, from_stdlib, is_active


class TestLevel:
    def test_ordering(self) -> None:
        assert Level.TRACE < Level.DEBUG < Level.INFO < Level.WARN < Level.ERROR < Level.CRIT

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("warn", Level.WARN),
            ("WARNING", Level.WARN),
            ("critical", Level.CRIT),
            ("everything", Level.TRACE),
            ("4", Level.ERROR),
            (2, Level.INFO),
            (Level.DEBUG, Level.DEBUG),
        ],
    )
    def test_parse(self, value: object, expected: Level) -> None:
        assert Level.parse(value) is expected

    @pytest.mark.parametrize("value", ["verbose", 9, None, True])
    def test_parse_rejects(self, value: object) -> None:
        with pytest.raises(ValueError):
            Level.parse(value)

    def test_threshold(self) -> None:
        assert is_active(Level.WARN, Level.WARN)
        assert not is_active(Level.DEBUG, Level.WARN)


class TestChannelRouting:
    @pytest.mark.parametrize("level", [Level.TRACE, Level.DEBUG, Level.INFO])
    def test_low_channel(self, level: Level) -> None:
        assert channel_for(level) is Channel.LOW

    @pytest.mark.parametrize("level", [Level.WARN, Level.ERROR, Level.CRIT])
    def test_high_channel(self, level: Level) -> None:
        assert channel_for(level) is Channel.HIGH

    def test_stdlib_mapping(self) -> None:
        assert from_stdlib(5) is Level.TRACE
        assert from_stdlib(logging.DEBUG) is Level.DEBUG
        assert from_stdlib(logging.INFO) is Level.INFO
        assert from_stdlib(logging.WARNING) is Level.WARN
        assert from_stdlib(logging.ERROR) is Level.ERROR
        assert from_stdlib(logging.CRITICAL) is Level.CRIT
