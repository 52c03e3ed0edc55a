"""Tests for per-run logging setup."""

import logging
from datetime import datetime

import pytest

from enricher.config import EnricherConfig
from enricher.logging_config import run_log_path, setup_logging


@pytest.fixture(autouse=True)
def restore_root_handlers():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


def _handler_levels() -> dict:
    return {type(h): h.level for h in logging.getLogger().handlers}


class TestRunLogPath:
    """Tests for run_log_path()."""

    def test_uses_data_dir_and_prefix(self, tmp_path):
        config = EnricherConfig(data_dir=str(tmp_path), log_prefix="nightly")
        path = run_log_path(config, datetime(2024, 3, 1, 9, 5, 7))
        assert path == tmp_path / "logs" / "nightly-2024-03-01-090507.log"


class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_creates_log_file(self, tmp_path):
        log_file = setup_logging(EnricherConfig(data_dir=str(tmp_path)))
        assert log_file.parent == tmp_path / "logs"
        assert log_file.name.startswith("enrich-")
        logging.getLogger("enricher.test").debug("written to file")
        logging.getLogger().handlers[-1].flush()
        assert "written to file" in log_file.read_text(encoding="utf-8")

    def test_terminal_level_follows_verbose(self, tmp_path):
        config = EnricherConfig(data_dir=str(tmp_path))
        setup_logging(config)
        assert _handler_levels()[logging.StreamHandler] == logging.INFO
        setup_logging(config, verbose=True)
        assert _handler_levels()[logging.StreamHandler] == logging.DEBUG
        assert _handler_levels()[logging.FileHandler] == logging.DEBUG

    def test_repeated_setup_does_not_stack_handlers(self, tmp_path):
        config = EnricherConfig(data_dir=str(tmp_path))
        setup_logging(config)
        setup_logging(config)
        assert len(logging.getLogger().handlers) == 2

    def test_quiet_loggers_held_at_warning(self, tmp_path):
        config = EnricherConfig(data_dir=str(tmp_path), quiet_loggers=("noisy.lib",))
        setup_logging(config)
        assert logging.getLogger("noisy.lib").level == logging.WARNING
