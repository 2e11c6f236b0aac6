"""
Tests for logging setup.
"""

import pytest
from loguru import logger

from notevault.config import LoggingConfig
from notevault.utils.logger import get_logger, setup_logging


@pytest.fixture(autouse=True)
def reset_sinks():
    """Drop sinks added by a test so file handles don't leak."""
    yield
    logger.remove()


class TestSetupLogging:
    """Test sink installation."""

    def test_console_only(self, tmp_path):
        log_dir = tmp_path / "logs"

        setup_logging(LoggingConfig(log_to_file=False, log_dir=str(log_dir)))

        assert not log_dir.exists()

    def test_file_sink_creates_directory(self, tmp_path):
        log_dir = tmp_path / "logs"

        setup_logging(LoggingConfig(log_dir=str(log_dir), serialize=False))
        get_logger(__name__).info("written to file")
        logger.complete()
        logger.remove()

        files = list(log_dir.glob("notevault_*.log"))
        assert len(files) == 1
        assert "written to file" in files[0].read_text(encoding="utf-8")

    def test_bound_module_name(self):
        """Test module loggers carry their name in extra."""
        records = []
        logger.remove()
        logger.add(records.append, format="{message}")

        get_logger("notevault.test").info("hello")

        assert records[0].record["extra"]["module"] == "notevault.test"
