"""Logging utilities for release actions."""

import logging
import os
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "release_actions"
LOG_DIR_ENV = "RELEASE_ACTIONS_LOG_DIR"


class ReleaseActionsLogger:
    """Logger wrapper with rich console output."""

    _handlers_setup = False

    def __init__(self, name: str = ROOT_LOGGER_NAME, level: str = "INFO"):
        """Initialize logger with rich formatting.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))

        # Handlers live on the package root logger only
        if not ReleaseActionsLogger._handlers_setup:
            root_logger = logging.getLogger(ROOT_LOGGER_NAME)
            if not root_logger.handlers:
                self._setup_handlers(root_logger)
            ReleaseActionsLogger._handlers_setup = True

        if name != ROOT_LOGGER_NAME and not self.logger.handlers:
            self.logger.propagate = True

    def _setup_handlers(self, logger: logging.Logger) -> None:
        """Setup console handler and optional file handler."""
        # Actions logs are read in a browser, keep lines unwrapped
        console = Console(soft_wrap=True)

        console_handler = RichHandler(
            console=console,
            show_time=False,
            show_path=False,
            rich_tracebacks=True,
        )
        console_handler.setLevel(logging.INFO)
        logger.addHandler(console_handler)

        log_dir = os.getenv(LOG_DIR_ENV)
        if log_dir:
            log_path = Path(log_dir)
            log_path.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_path / "release-actions.log")
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(
                logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
            )
            logger.addHandler(file_handler)

    def debug(self, message: str, **kwargs) -> None:
        """Log debug message."""
        self.logger.debug(message, **kwargs)

    def info(self, message: str, **kwargs) -> None:
        """Log info message."""
        self.logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        """Log warning message."""
        self.logger.warning(message, **kwargs)

    def error(self, message: str, **kwargs) -> None:
        """Log error message."""
        self.logger.error(message, **kwargs)

    def exception(self, message: str, **kwargs) -> None:
        """Log exception with traceback."""
        self.logger.exception(message, **kwargs)


logger = ReleaseActionsLogger()


def get_logger(name: Optional[str] = None, level: str = "INFO") -> ReleaseActionsLogger:
    """Get logger instance.

    Args:
        name: Logger name (defaults to 'release_actions')
        level: Log level

    Returns:
        Logger instance
    """
    if name is None:
        return logger
    return ReleaseActionsLogger(name, level)


def enable_verbose_logging() -> None:
    """Switch package loggers and the console handler to DEBUG."""
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)

    for name, child_logger in logging.Logger.manager.loggerDict.items():
        if isinstance(child_logger, logging.Logger) and name.startswith(ROOT_LOGGER_NAME):
            child_logger.setLevel(logging.DEBUG)

    for handler in root_logger.handlers:
        if isinstance(handler, RichHandler):
            handler.setLevel(logging.DEBUG)

    logger.debug("Verbose logging enabled")
