"""
Logging system for rulewise.
Provides human-readable logs with console output and optional file output.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional


# ANSI color codes for terminal output
class Colors:
    RESET = "\033[0m"
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"
    BOLD = "\033[1m"


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for console output."""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.CYAN,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def format(self, record):
        # Work on a copy so file handlers sharing the record stay uncolored
        record = logging.makeLogRecord(record.__dict__)
        color = self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)
        record.levelname = f"{color}{record.levelname}{Colors.RESET}"
        record.msg = f"{color}{record.msg}{Colors.RESET}"
        return super().format(record)


class RulewiseLogger:
    """
    Central logging setup for rulewise.

    Features:
    - Console output with colors
    - Optional daily file output (plain text)
    - Library modules log through logging.getLogger(__name__) under the
      "rulewise" namespace and inherit these handlers
    """

    _instance: Optional['RulewiseLogger'] = None
    _initialized: bool = False

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, log_dir: str = "", log_level: str = "INFO"):
        if RulewiseLogger._initialized:
            return

        self.log_dir = Path(log_dir) if log_dir else None
        self.main_logger = self._create_logger("rulewise", log_level)

        RulewiseLogger._initialized = True

    def _create_logger(self, name: str, level: str) -> logging.Logger:
        """Create a configured logger instance."""
        logger = logging.getLogger(name)
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        logger.handlers.clear()

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(ColoredFormatter(
            "%(asctime)s | %(levelname)s | %(message)s",
            datefmt="%H:%M:%S"
        ))
        logger.addHandler(console_handler)

        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            log_file = self.log_dir / f"rulewise_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setFormatter(logging.Formatter(
                "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S"
            ))
            logger.addHandler(file_handler)

        return logger

    def info(self, msg: str, *args, **kwargs):
        """Log info message."""
        self.main_logger.info(msg, *args, **kwargs)

    def debug(self, msg: str, *args, **kwargs):
        """Log debug message."""
        self.main_logger.debug(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        """Log warning message."""
        self.main_logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        """Log error message."""
        self.main_logger.error(msg, *args, **kwargs)

    def decision(self, ruleset: str, value, matched: Optional[int], **kwargs):
        """
        Log a ruleset decision with structured format.

        Args:
            ruleset: RuleSet name
            value: Returned value
            matched: Matched outcome index, or None for fallback
            **kwargs: Additional fields
        """
        source = "fallback" if matched is None else f"outcome[{matched}]"
        parts = ["[DECISION]", f"ruleset={ruleset}", f"source={source}", f"value={value!r}"]
        for key, val in kwargs.items():
            parts.append(f"{key}={val}")
        self.main_logger.info(" | ".join(parts))


# Global logger instance
_logger: Optional[RulewiseLogger] = None


def get_logger(log_dir: str | None = None, log_level: str | None = None) -> RulewiseLogger:
    """Get or create the global logger instance (defaults from config)."""
    global _logger
    if _logger is None:
        if log_dir is None or log_level is None:
            from ..config import get_config
            log_config = get_config().log
            log_dir = log_config.log_dir if log_dir is None else log_dir
            log_level = log_config.level if log_level is None else log_level
        _logger = RulewiseLogger(log_dir, log_level)
    return _logger


def setup_logger(log_dir: str = "", log_level: str = "INFO") -> RulewiseLogger:
    """Initialize the logger with custom settings."""
    global _logger
    RulewiseLogger._initialized = False
    RulewiseLogger._instance = None
    _logger = RulewiseLogger(log_dir, log_level)
    return _logger
