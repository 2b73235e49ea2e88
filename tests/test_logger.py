"""
Tests for the rulewise logging setup.
"""

import logging

from rulewise.utils import get_logger, setup_logger
from rulewise.utils.logger import ColoredFormatter, Colors


class TestLogger:

    def test_setup_replaces_singleton(self):
        first = setup_logger(log_level="WARNING")
        assert get_logger() is first
        second = setup_logger(log_level="DEBUG")
        assert second.main_logger.level == logging.DEBUG

    def test_file_output(self, tmp_path):
        logger = setup_logger(log_dir=str(tmp_path / "logs"), log_level="INFO")
        logger.decision("pricing", 8, 0)
        for handler in logger.main_logger.handlers:
            handler.flush()

        files = list((tmp_path / "logs").glob("rulewise_*.log"))
        assert len(files) == 1
        text = files[0].read_text(encoding="utf-8")
        assert "[DECISION] | ruleset=pricing | source=outcome[0] | value=8" in text
        assert Colors.RESET not in text

        for handler in list(logger.main_logger.handlers):
            handler.close()
            logger.main_logger.removeHandler(handler)

    def test_fallback_decision(self, caplog):
        logger = setup_logger(log_level="INFO")
        with caplog.at_level(logging.INFO, logger="rulewise"):
            logger.decision("pricing", 0, None, forced=2)
        assert "source=fallback" in caplog.text
        assert "forced=2" in caplog.text


class TestColoredFormatter:

    def test_colors_do_not_leak_into_record(self):
        formatter = ColoredFormatter("%(levelname)s | %(message)s")
        record = logging.LogRecord("rulewise", logging.ERROR, __file__, 1, "boom", None, None)
        formatted = formatter.format(record)
        assert Colors.RED in formatted
        assert record.msg == "boom"
        assert record.levelname == "ERROR"
