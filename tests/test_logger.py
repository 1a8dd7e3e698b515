"""
Tests for the leveled Logger abstraction and its concrete sinks.
"""

import io
import logging
from datetime import UTC, datetime

import pytest

from minidnf.core.logger import (
    FileLineSink,
    Level,
    ListLineSink,
    LogRecord,
    LogRouter,
    LoggerLevelNotSetError,
    MemoryLogger,
    StdlibLogger,
    StreamLineSink,
    StringLogger,
    format_line,
    level_to_str,
)
from minidnf.core.logger.sinks import NOTICE, TRACE, from_stdlib_level, to_stdlib_level


class RecordingArg:
    """Format argument that remembers whether it was ever rendered."""

    def __init__(self):
        self.formatted = False

    def __format__(self, spec):
        self.formatted = True
        return "rendered"


class ExplodingLogger(MemoryLogger):
    def write(self, time, pid, level, message):
        raise OSError("sink is gone")


# ── Levels ───────────────────────────────────────────────────────────


class TestLevel:
    def test_ordering_most_to_least_severe(self):
        assert Level.CRITICAL < Level.ERROR < Level.WARNING < Level.NOTICE
        assert Level.NOTICE < Level.INFO < Level.DEBUG < Level.TRACE

    def test_level_to_str(self):
        assert level_to_str(Level.NOTICE) == "NOTICE"
        assert level_to_str(Level.TRACE) == "TRACE"

    def test_level_to_str_unknown(self):
        assert level_to_str(42) == "UNDEFINED"


# ── Threshold ────────────────────────────────────────────────────────


class TestThreshold:
    def test_get_level_before_set_raises(self):
        log = MemoryLogger()
        assert not log.is_level_set()
        with pytest.raises(LoggerLevelNotSetError):
            log.get_level()

    def test_set_then_get(self):
        log = MemoryLogger()
        log.set_level(Level.NOTICE)
        assert log.is_level_set()
        assert log.get_level() == Level.NOTICE

    def test_set_level_overwrites(self):
        log = MemoryLogger()
        log.set_level(Level.DEBUG)
        log.set_level(Level.ERROR)
        assert log.get_level() == Level.ERROR

    def test_unset_logger_enables_nothing(self):
        log = MemoryLogger()
        for level in Level:
            assert not log.is_enabled_for(level)

    @pytest.mark.parametrize("threshold", list(Level))
    def test_enabled_matches_severity_order(self, threshold):
        log = MemoryLogger()
        log.set_level(threshold)
        for level in Level:
            assert log.is_enabled_for(level) == (level <= threshold)

    def test_unset_logger_writes_nothing(self):
        log = MemoryLogger()
        log.critical("boom")
        assert log.records == []


# ── Formatting ───────────────────────────────────────────────────────


class TestFormatting:
    def test_per_level_calls_route_to_matching_level(self, memory_logger):
        memory_logger.critical("c")
        memory_logger.error("e")
        memory_logger.warning("w")
        memory_logger.notice("n")
        memory_logger.info("i")
        memory_logger.debug("d")
        memory_logger.trace("t")
        assert [r.level for r in memory_logger.records] == list(Level)
        assert [r.message for r in memory_logger.records] == ["c", "e", "w", "n", "i", "d", "t"]

    def test_template_arguments(self, memory_logger):
        memory_logger.info("Installing {} of {}", 2, "foo")
        assert memory_logger.records[-1].message == "Installing 2 of foo"

    def test_braces_kept_without_args(self, memory_logger):
        memory_logger.info("literal {braces}")
        assert memory_logger.records[-1].message == "literal {braces}"

    def test_suppressed_level_skips_formatting(self):
        log = MemoryLogger()
        log.set_level(Level.WARNING)
        arg = RecordingArg()
        log.debug("value: {}", arg)
        assert arg.formatted is False
        assert log.records == []

    def test_enabled_level_formats(self):
        log = MemoryLogger()
        log.set_level(Level.WARNING)
        arg = RecordingArg()
        log.error("value: {}", arg)
        assert arg.formatted is True
        assert log.records[0].message == "value: rendered"

    def test_thunk_only_called_when_enabled(self):
        log = MemoryLogger()
        log.set_level(Level.INFO)
        calls = []

        def message():
            calls.append(1)
            return "expensive"

        log.debug(message)
        assert calls == []
        log.info(message)
        assert calls == [1]
        assert log.records[0].message == "expensive"

    def test_bad_template_is_dropped(self, memory_logger):
        memory_logger.info("{} and {}", "only-one")
        assert memory_logger.records == []

    def test_record_carries_clock_values(self, memory_logger, clock):
        memory_logger.info("x")
        record = memory_logger.records[0]
        assert isinstance(record, LogRecord)
        assert record.pid == 4242
        assert record.time == clock.now()


class TestThresholdScenario:
    def test_warning_threshold(self):
        log = MemoryLogger()
        log.set_level(Level.WARNING)
        log.info("x")
        assert log.records == []
        log.error("x")
        assert len(log.records) == 1
        assert log.records[0].level == Level.ERROR


# ── Sink failures ────────────────────────────────────────────────────


class TestSinkFailure:
    def test_log_line_swallows_sink_errors(self):
        log = ExplodingLogger()
        log.set_level(Level.TRACE)
        log.error("still fine")
        log.log_line(Level.CRITICAL, "also fine")

    def test_sink_receives_levels_below_threshold_when_bypassed(self):
        log = MemoryLogger()
        log.set_level(Level.ERROR)
        log.log_line(Level.DEBUG, "direct")
        assert log.records[0].level == Level.DEBUG


# ── Concrete loggers ─────────────────────────────────────────────────


class TestMemoryLogger:
    def test_max_items_keeps_newest(self, clock):
        log = MemoryLogger(max_items=2, clock=clock)
        log.set_level(Level.INFO)
        for i in range(4):
            log.info("msg {}", i)
        assert [r.message for r in log.records] == ["msg 2", "msg 3"]

    def test_write_to_replays_records(self, memory_logger):
        memory_logger.warning("one")
        memory_logger.debug("two")
        target = MemoryLogger()
        memory_logger.write_to(target)
        assert target.records == memory_logger.records

    def test_clear(self, memory_logger):
        memory_logger.info("x")
        memory_logger.clear()
        assert memory_logger.records == []


class TestStringLogger:
    def test_format_line(self):
        time = datetime(2021, 3, 1, 10, 0, 5, tzinfo=UTC)
        assert format_line(time, 99, Level.INFO, "hello") == "2021-03-01T10:00:05Z [99] INFO hello\n"

    def test_lines_reach_sink(self, clock):
        sink = ListLineSink()
        log = StringLogger(sink, clock=clock)
        log.set_level(Level.INFO)
        log.notice("Transaction {} started", 7)
        assert sink.lines == ["2020-09-13T12:26:40Z [4242] NOTICE Transaction 7 started\n"]

    def test_stream_sink(self, clock):
        stream = io.StringIO()
        log = StringLogger(StreamLineSink(stream), clock=clock)
        log.set_level(Level.ERROR)
        log.error("bad")
        log.info("hidden")
        assert stream.getvalue().endswith("ERROR bad\n")
        assert "hidden" not in stream.getvalue()

    def test_file_sink_appends(self, tmp_path, clock):
        path = tmp_path / "logs" / "minidnf.log"
        log = StringLogger(FileLineSink(path), clock=clock)
        log.set_level(Level.DEBUG)
        log.debug("first")
        log.debug("second")
        lines = path.read_text().splitlines()
        assert len(lines) == 2
        assert lines[1].endswith("DEBUG second")


class TestStdlibLogger:
    def test_level_mapping_roundtrip(self):
        for level in Level:
            assert from_stdlib_level(to_stdlib_level(level)) == level

    def test_extra_levels(self):
        assert to_stdlib_level(Level.NOTICE) == NOTICE
        assert to_stdlib_level(Level.TRACE) == TRACE
        assert logging.getLevelName(NOTICE) == "NOTICE"

    def test_forwards_to_logging(self, caplog):
        log = StdlibLogger(logging.getLogger("minidnf.test"))
        log.set_level(Level.INFO)
        with caplog.at_level(logging.INFO, logger="minidnf.test"):
            log.warning("disk {} full", "/var")
        assert caplog.records[-1].levelno == logging.WARNING
        assert caplog.records[-1].getMessage() == "disk /var full"
        assert caplog.records[-1].dnf_pid > 0


class TestLogRouter:
    def test_fans_out(self, clock):
        a, b = MemoryLogger(), MemoryLogger()
        router = LogRouter([a, b], clock=clock)
        router.set_level(Level.DEBUG)
        router.info("hi")
        assert [r.message for r in a.records] == ["hi"]
        assert [r.message for r in b.records] == ["hi"]

    def test_respects_child_threshold(self, clock):
        quiet = MemoryLogger()
        quiet.set_level(Level.ERROR)
        chatty = MemoryLogger()
        router = LogRouter([quiet, chatty], clock=clock)
        router.set_level(Level.TRACE)
        router.debug("detail")
        assert quiet.records == []
        assert len(chatty.records) == 1

    def test_write_forwards_every_level(self, clock):
        quiet = MemoryLogger()
        quiet.set_level(Level.ERROR)
        router = LogRouter([quiet], clock=clock)
        router.write(clock.now(), 1, Level.DEBUG, "direct write")
        assert [(r.level, r.message) for r in quiet.records] == [(Level.DEBUG, "direct write")]

    def test_buffered_replay_reaches_quiet_child(self, clock):
        buffer = MemoryLogger(clock=clock)
        buffer.set_level(Level.TRACE)
        buffer.trace("early detail")
        quiet = MemoryLogger()
        quiet.set_level(Level.ERROR)
        buffer.write_to(LogRouter([quiet]))
        assert [r.message for r in quiet.records] == ["early detail"]

    def test_failing_child_does_not_block_others(self, clock):
        good = MemoryLogger()
        router = LogRouter([ExplodingLogger(), good], clock=clock)
        router.set_level(Level.INFO)
        router.info("x")
        assert len(good.records) == 1
