"""
Tests for logging setup — Python logging and the process logger.
"""

import logging

from minidnf.core import context
from minidnf.core.logger import Level, LogRouter, MemoryLogger, StdlibLogger, StringLogger
from minidnf.core.observability.logging_config import (
    build_process_logger,
    parse_level,
    setup_logging,
)


class TestParseLevel:
    def test_standard_names(self):
        assert parse_level("debug") == logging.DEBUG
        assert parse_level("ERROR") == logging.ERROR

    def test_extra_levels(self):
        assert parse_level("notice") == 25
        assert parse_level("TRACE") == 5

    def test_fallback(self):
        assert parse_level(None) == logging.WARNING
        assert parse_level("loud") == logging.WARNING


class TestSetupLogging:
    def test_console_level(self):
        setup_logging(level="INFO")
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        assert logging.raiseExceptions is False

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "debug.log"
        setup_logging(level="WARNING", log_file=str(log_file), log_file_level="DEBUG")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 2

        logging.getLogger("minidnf.test").debug("to file only")
        for handler in root.handlers:
            handler.flush()
        assert "to file only" in log_file.read_text()


class TestProcessLogger:
    def test_console_only(self):
        router = build_process_logger("INFO")
        assert isinstance(router, LogRouter)
        assert router.get_level() == Level.INFO
        [bridge] = router.loggers
        assert isinstance(bridge, StdlibLogger)

    def test_with_logfile(self, tmp_path):
        router = build_process_logger("ERROR", tmp_path / "minidnf.log")
        assert router.get_level() == Level.DEBUG
        bridge, file_logger = router.loggers
        assert bridge.get_level() == Level.ERROR
        assert isinstance(file_logger, StringLogger)

        router.debug("only in file")
        assert "DEBUG only in file" in (tmp_path / "minidnf.log").read_text()


class TestContext:
    def test_default_logger_is_silent(self):
        context.reset_logger()
        log = context.get_logger()
        assert isinstance(log, StdlibLogger)
        assert not log.is_level_set()

    def test_set_logger(self):
        log = MemoryLogger()
        context.set_logger(log)
        assert context.get_logger() is log
