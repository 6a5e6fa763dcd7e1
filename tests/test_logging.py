"""Tests for logging configuration."""

import logging
import sys

import pytest
from loguru import logger
from rich.logging import RichHandler

from parlang import logging_utils
from parlang.config import CheckerSettings
from parlang.core.ast import BoolLit, IntLit, Match, MatchArm, PBool
from parlang.core.checker import TypeChecker
from parlang.logging_utils import InterceptHandler, LogFilter, configure_logging


@pytest.fixture
def captured():
    messages = []
    handler_id = logger.add(messages.append, level="DEBUG", format="{level} {message}")
    yield messages
    logger.remove(handler_id)


class TestLogFilter:
    """Tests for PARLANG_LOG_FILTER parsing."""

    def test_global_level(self):
        assert LogFilter.parse("debug") == LogFilter("DEBUG", {})

    def test_module_levels(self):
        log_filter = LogFilter.parse("info,parlang.core=debug, parlang.core.checker=FALSE")
        assert log_filter.level == "INFO"
        assert log_filter.modules == {"parlang.core": "DEBUG", "parlang.core.checker": False}

    def test_modules_only(self):
        assert LogFilter.parse("parlang.core.unify=false").level == "INFO"

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("PARLANG_LOG_FILTER", "warning")
        assert LogFilter.from_env().level == "WARNING"

    def test_default(self, monkeypatch):
        monkeypatch.delenv("PARLANG_LOG_FILTER", raising=False)
        assert LogFilter.from_env() == LogFilter()


class RecordingLogger:
    def __init__(self):
        self.removed = 0
        self.sinks = []

    def remove(self):
        self.removed += 1

    def add(self, sink, **kwargs):
        self.sinks.append((sink, kwargs))
        return len(self.sinks)

    def debug(self, message, *args):
        pass


@pytest.fixture
def fake_logger(monkeypatch):
    fake = RecordingLogger()
    monkeypatch.setattr(logging_utils, "logger", fake)
    monkeypatch.setattr(logging_utils, "_CONFIGURED_PROFILE", None)
    monkeypatch.setattr(logging.getLogger(), "handlers", [])
    return fake


class TestConfigureLogging:
    """Tests for process-level configuration."""

    def test_same_profile_is_noop(self, fake_logger, monkeypatch):
        monkeypatch.setenv("PARLANG_LOG_FILTER", "debug")
        configure_logging()
        configure_logging()
        assert fake_logger.removed == 1
        assert fake_logger.sinks[0][0] is sys.stderr
        assert fake_logger.sinks[0][1]["level"] == "DEBUG"

    def test_profile_switch_reconfigures(self, fake_logger):
        configure_logging(profile="default")
        configure_logging(profile="console")
        assert fake_logger.removed == 2
        assert isinstance(fake_logger.sinks[1][0], RichHandler)
        assert logging_utils._CONFIGURED_PROFILE == "console"

    def test_stdlib_logging_is_intercepted(self, fake_logger):
        configure_logging()
        assert any(isinstance(h, InterceptHandler) for h in logging.getLogger().handlers)


class TestCheckerLogging:
    """Tests for events logged by the checker."""

    def test_non_exhaustive_warning_is_logged(self, checker, captured):
        checker.infer_type(Match(BoolLit(True), [MatchArm(PBool(True), IntLit(1))]))
        warnings = [m for m in captured if m.startswith("WARNING")]
        assert len(warnings) == 1
        assert "exhaustiveness.non_exhaustive missing=false" in warnings[0]

    def test_warning_logging_can_be_disabled(self, registry, captured):
        checker = TypeChecker(registry, CheckerSettings(log_warnings=False))
        checker.infer_type(Match(BoolLit(True), [MatchArm(PBool(True), IntLit(1))]))
        assert len(checker.warnings) == 1
        assert not [m for m in captured if m.startswith("WARNING")]
