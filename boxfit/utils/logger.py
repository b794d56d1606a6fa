"""Logging utilities."""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

DEFAULT_LOGGER_NAME = "boxfit"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(level: Union[str, int]) -> int:
    """
    Convert a level name or number to a logging level.

    Raises:
        ValueError: If the name is not a standard logging level.
    """
    if isinstance(level, int):
        return level

    resolved = logging.getLevelName(str(level).upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def setup_logger(
    name: str = DEFAULT_LOGGER_NAME,
    level: Union[str, int] = "INFO",
    log_file: Optional[str] = None,
    console: bool = True,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """
    Configure a logger, replacing any handlers from an earlier call.

    Replaced handlers are closed, so calling this again with a different
    ``log_file`` releases the previous file.

    Args:
        name: Logger name.
        level: Level name (DEBUG, INFO, WARNING, ERROR) or number.
        log_file: Optional file path for logging.
        console: Whether to log to stdout.
        format_string: Custom format string.

    Returns:
        Configured logger instance.
    """
    logger = logging.getLogger(name)
    logger.setLevel(resolve_level(level))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: List[logging.Handler] = []
    if console:
        handlers.append(logging.StreamHandler(sys.stdout))
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    formatter = logging.Formatter(format_string or LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def setup_logger_from_config(config: Dict[str, Any]) -> logging.Logger:
    """
    Configure the package logger from a config's ``logging`` section.

    Args:
        config: Full configuration dictionary.

    Returns:
        Configured package logger.
    """
    section = config.get("logging") or {}
    return setup_logger(
        DEFAULT_LOGGER_NAME,
        level=section.get("level") or "INFO",
        log_file=section.get("log_file"),
        format_string=section.get("format"),
    )


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """
    Get an existing logger or create a basic one.

    Child loggers such as ``boxfit.ImportanceSampler`` share the handlers of
    their top-level package logger, which is set up on first use.

    Args:
        name: Logger name.

    Returns:
        Logger instance.
    """
    logger = logging.getLogger(name)

    if not logger.hasHandlers():
        setup_logger(name.split(".")[0])

    return logger


class LoggerMixin:
    """Mixin class to add logging to any class."""

    @property
    def logger(self) -> logging.Logger:
        """Get class-specific logger."""
        if not hasattr(self, "_logger"):
            self._logger = get_logger(f"{DEFAULT_LOGGER_NAME}.{self.__class__.__name__}")
        return self._logger


class ProgressLogger:
    """Log progress for long-running operations."""

    def __init__(
        self,
        total: int,
        logger: Optional[logging.Logger] = None,
        description: str = "Processing",
        log_interval: int = 10,
        level: int = logging.INFO,
    ):
        """
        Initialize progress logger.

        Args:
            total: Total number of items.
            logger: Logger to use.
            description: Progress description.
            log_interval: Percentage interval for logging.
            level: Level of the progress messages.
        """
        self.total = total
        self.logger = logger or get_logger()
        self.description = description
        self.log_interval = log_interval
        self.level = level

        self.current = 0
        self.last_logged_pct = -1

    def update(self, n: int = 1) -> None:
        """
        Update progress.

        Args:
            n: Number of items processed.
        """
        self.current += n
        pct = int(100 * self.current / self.total) if self.total else 100

        if pct >= self.last_logged_pct + self.log_interval:
            self.logger.log(
                self.level,
                f"{self.description}: {self.current}/{self.total} ({pct}%)",
            )
            self.last_logged_pct = pct

    def __enter__(self):
        self.logger.log(self.level, f"{self.description}: Starting ({self.total} items)")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.logger.log(self.level, f"{self.description}: Completed")
        else:
            self.logger.error(f"{self.description}: Failed - {exc_val}")
