"""Logging configuration for Spendlog.

Every module logs through a child of the ``spendlog`` logger. The dated log
file receives everything at the configured level. The console stands in for
the chat: it prints command replies from ``spendlog.cli`` as bare text and
shows warnings and errors from any module with their level.
"""

import logging
from datetime import date
from typing import Optional

from config import Config

LOGGER_NAME = "spendlog"
REPLY_LOGGER_NAME = f"{LOGGER_NAME}.cli"


class ConsoleFilter(logging.Filter):
    """Pass command replies and anything at WARNING or above."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno >= logging.WARNING:
            return True
        return record.name == REPLY_LOGGER_NAME or record.name.startswith(
            REPLY_LOGGER_NAME + "."
        )


class ConsoleFormatter(logging.Formatter):
    """Format INFO records as plain replies and prefix the rest with their level."""

    def __init__(self):
        super().__init__("%(levelname)s - %(message)s")
        self._reply_formatter = logging.Formatter("%(message)s")

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno == logging.INFO:
            return self._reply_formatter.format(record)
        return super().format(record)


def setup_logging(config: Config) -> logging.Logger:
    """Set up application logging with file and console handlers.

    Args:
        config: Application configuration containing log settings.

    Returns:
        The root ``spendlog`` logger.
    """
    config.log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(config.log_level)

    # Calling this again replaces the handlers instead of stacking them
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    log_filename = f"spendlog-{date.today().isoformat()}.log"
    file_handler = logging.FileHandler(config.log_dir / log_filename)
    file_handler.setLevel(config.log_level)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(config.log_level)
    console_handler.addFilter(ConsoleFilter())
    console_handler.setFormatter(ConsoleFormatter())

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get the application logger, or a child of it for a module.

    Args:
        name: Dotted module name such as ``services.ledger``. A leading
            ``spendlog.`` is not repeated.

    Returns:
        ``spendlog`` when no name is given, otherwise ``spendlog.<name>``.
    """
    if not name or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
