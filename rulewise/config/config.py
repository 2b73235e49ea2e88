"""
Configuration management for rulewise.
Loads settings from environment variables with sensible defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class EvaluationConfig:
    """
    Defaults applied to every RuleSet that does not override them.

    default_zone:
        Zone used for timestamp literals and naive datetimes evaluated
        outside any tz scope.
    inherit_tz_scope:
        False (default): a tz zone is visible only to its direct children;
        nested all/any/cond must re-wrap with tz.
        True: tz zones flow down the whole subtree.
    """
    default_zone: str = "UTC"
    inherit_tz_scope: bool = False


@dataclass
class LogConfig:
    """Logging configuration."""
    level: str = "INFO"
    log_dir: str = ""  # empty = console only


@dataclass
class CLIConfig:
    """Command line defaults."""
    trace: bool = False


class Config:
    """
    Central configuration manager.

    Loads configuration from environment variables (and .env files) and
    provides typed access to all settings.
    """

    _instance: Optional['Config'] = None

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, env_file: str = ".env"):
        if self._initialized:
            return

        # Later files override earlier ones
        for env_name in ["rulewise.env", ".env", env_file]:
            env_path = Path(env_name)
            if env_path.exists():
                load_dotenv(env_path, override=True)

        self.evaluation = self._load_evaluation_config()
        self.log = self._load_log_config()
        self.cli = self._load_cli_config()

        self._initialized = True

    def _load_evaluation_config(self) -> EvaluationConfig:
        """Load evaluation defaults from environment."""
        return EvaluationConfig(
            default_zone=os.getenv("RULEWISE_DEFAULT_ZONE", "UTC").strip() or "UTC",
            inherit_tz_scope=_env_bool("RULEWISE_INHERIT_TZ_SCOPE", "false"),
        )

    def _load_log_config(self) -> LogConfig:
        """Load logging configuration from environment."""
        return LogConfig(
            level=os.getenv("RULEWISE_LOG_LEVEL", "INFO").upper(),
            log_dir=os.getenv("RULEWISE_LOG_DIR", ""),
        )

    def _load_cli_config(self) -> CLIConfig:
        return CLIConfig(trace=_env_bool("RULEWISE_TRACE", "false"))

    def summary(self) -> dict:
        """Flat dict of effective settings (for `rulewise validate` output)."""
        return {
            "default_zone": self.evaluation.default_zone,
            "inherit_tz_scope": self.evaluation.inherit_tz_scope,
            "log_level": self.log.level,
            "log_dir": self.log.log_dir or "(console only)",
            "trace": self.cli.trace,
        }


def get_config(env_file: str = ".env") -> Config:
    """Get or create the global configuration instance."""
    return Config(env_file)


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() re-reads the environment."""
    Config._instance = None
