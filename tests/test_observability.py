"""
Tests for logging configuration — level resolution and handler setup.
"""

import logging
from pathlib import Path

import pytest

from hostprep.core.observability.logging_config import (
    LOG_FILE_ENV,
    LOG_LEVEL_ENV,
    resolve_level,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestResolveLevel:
    def test_flag_wins(self, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV, "ERROR")
        assert resolve_level("DEBUG") == "DEBUG"

    def test_env_fallback(self, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV, "INFO")
        assert resolve_level(None) == "INFO"

    def test_default(self, monkeypatch):
        monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
        assert resolve_level() == "WARNING"


class TestSetupLogging:
    def test_console_only(self, monkeypatch):
        monkeypatch.delenv(LOG_FILE_ENV, raising=False)
        setup_logging("INFO")
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], logging.StreamHandler)

    def test_unknown_level_is_warning(self, monkeypatch):
        monkeypatch.delenv(LOG_FILE_ENV, raising=False)
        setup_logging("CHATTY")
        assert logging.getLogger().level == logging.WARNING

    def test_repeat_calls_do_not_stack_handlers(self, monkeypatch):
        monkeypatch.delenv(LOG_FILE_ENV, raising=False)
        setup_logging("DEBUG")
        setup_logging("DEBUG")
        assert len(logging.getLogger().handlers) == 1

    def test_file_handler_with_own_level(self, tmp_path: Path):
        log = tmp_path / "hostprep.log"
        setup_logging("WARNING", log_file=str(log), log_file_level="DEBUG")
        root = logging.getLogger()
        assert root.level == logging.DEBUG

        logging.getLogger("hostprep.test").debug("written to file only")
        for handler in root.handlers:
            handler.flush()
        assert "written to file only" in log.read_text()

    def test_file_from_env(self, tmp_path: Path, monkeypatch):
        log = tmp_path / "env.log"
        monkeypatch.setenv(LOG_FILE_ENV, str(log))
        setup_logging("INFO")
        assert any(isinstance(h, logging.FileHandler) for h in logging.getLogger().handlers)
