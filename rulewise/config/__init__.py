"""
Configuration module.
"""

from .config import (
    Config,
    EvaluationConfig,
    LogConfig,
    CLIConfig,
    get_config,
    reset_config,
)

__all__ = [
    "Config",
    "EvaluationConfig",
    "LogConfig",
    "CLIConfig",
    "get_config",
    "reset_config",
]
