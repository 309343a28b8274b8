"""
Picton core: configuration, logging and clock.
"""

from .clock import FixedClock, SystemClock, UtcClock
from .config_manager import ConfigManager, PictonConfig
from .logging_config import setup_logging

__all__ = [
    "ConfigManager",
    "FixedClock",
    "PictonConfig",
    "SystemClock",
    "UtcClock",
    "setup_logging",
]
