# tests/test_logging_config.py

"""Tests for the per-run logging configuration."""

import logging
import unittest
from unittest.mock import patch

from src.config.logging_config import ROOT_LOGGER_NAME, setup_logging
from src.config.settings import Settings


class TestLoggingConfig(unittest.TestCase):
    """Verify logging setup behaviour."""

    def setUp(self) -> None:
        """Start every test with an unconfigured price_compare logger."""
        self.root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        self._drop_handlers()
        self.addCleanup(self._drop_handlers)

    def _drop_handlers(self) -> None:
        for handler in list(self.root_logger.handlers):
            self.root_logger.removeHandler(handler)
            handler.close()

    def _stream_handlers(self) -> list[logging.Handler]:
        return [
            h
            for h in self.root_logger.handlers
            if isinstance(h, logging.StreamHandler)
            and not isinstance(h, logging.FileHandler)
        ]

    def test_setup_creates_log_file(self) -> None:
        """setup_logging returns a path that exists on disk."""
        log_path = setup_logging()
        self.assertTrue(log_path.exists())

    def test_log_file_naming_convention(self) -> None:
        """Log file name matches run_YYYYMMDD_HHMMSS.log format."""
        log_path = setup_logging()
        self.assertRegex(log_path.name, r"^run_\d{8}_\d{6}\.log$")

    def test_log_file_inside_logs_dir(self) -> None:
        """Default location is Settings.LOGS_DIR."""
        log_path = setup_logging()
        self.assertEqual(log_path.parent, Settings.LOGS_DIR)

    def test_explicit_logs_dir(self) -> None:
        target = Settings.DATA_DIR / "custom_logs"
        log_path = setup_logging(target)
        self.assertEqual(log_path.parent, target)
        self.assertTrue(target.is_dir())

    def test_file_handler_level_debug(self) -> None:
        """File handler should be set to DEBUG level."""
        setup_logging()
        file_handlers = [
            h
            for h in self.root_logger.handlers
            if isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(len(file_handlers), 1)
        self.assertEqual(file_handlers[0].level, logging.DEBUG)

    def test_console_handler_level_warning(self) -> None:
        """Console handler defaults to WARNING."""
        with patch.dict("os.environ", {}, clear=False) as env:
            env.pop("PRICE_COMPARE_CONSOLE_LEVEL", None)
            setup_logging()
        handlers = self._stream_handlers()
        self.assertEqual(len(handlers), 1)
        self.assertEqual(handlers[0].level, logging.WARNING)

    def test_console_level_from_environment(self) -> None:
        with patch.dict(
            "os.environ", {"PRICE_COMPARE_CONSOLE_LEVEL": "info"}
        ):
            setup_logging()
        self.assertEqual(self._stream_handlers()[0].level, logging.INFO)

    def test_bad_console_level_falls_back(self) -> None:
        with patch.dict(
            "os.environ", {"PRICE_COMPARE_CONSOLE_LEVEL": "chatty"}
        ):
            setup_logging()
        self.assertEqual(self._stream_handlers()[0].level, logging.WARNING)

    def test_repeated_calls_no_duplicate_handlers(self) -> None:
        """Calling setup_logging twice does not duplicate handlers."""
        setup_logging()
        count_before = len(self.root_logger.handlers)
        setup_logging()
        self.assertEqual(len(self.root_logger.handlers), count_before)

    def test_root_logger_level_is_debug(self) -> None:
        """The project logger is set to DEBUG."""
        setup_logging()
        self.assertEqual(self.root_logger.level, logging.DEBUG)

    def test_child_loggers_reach_file(self) -> None:
        """Records from price_compare.* loggers land in the run log."""
        log_path = setup_logging()
        logging.getLogger("price_compare.aggregator").debug(
            "dropped offer %s", "o-42"
        )
        for handler in self.root_logger.handlers:
            handler.flush()
        self.assertIn("dropped offer o-42", log_path.read_text("utf-8"))


if __name__ == "__main__":
    unittest.main()
