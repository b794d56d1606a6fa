"""Utility modules."""

from .config_loader import ConfigLoader, DEFAULT_CONFIG, load_config, get_nested, set_nested
from .logger import setup_logger, setup_logger_from_config, get_logger, LoggerMixin, ProgressLogger

__all__ = [
    "ConfigLoader",
    "DEFAULT_CONFIG",
    "load_config",
    "get_nested",
    "set_nested",
    "setup_logger",
    "setup_logger_from_config",
    "get_logger",
    "LoggerMixin",
    "ProgressLogger",
]
