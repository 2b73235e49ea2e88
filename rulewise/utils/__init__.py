"""
Utility modules.
"""

from .logger import get_logger, setup_logger, RulewiseLogger

__all__ = [
    "get_logger",
    "setup_logger",
    "RulewiseLogger",
]
