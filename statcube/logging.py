"""Logging utilities"""

from logging import FileHandler, Formatter, Logger, StreamHandler, getLogger

__all__ = ["get_logger", "create_logger"]

DEFAULT_LOGGER_NAME = "statcube"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(message)s"

logger: Logger | None = None


def get_logger(path: str | None = None) -> Logger:
    """Get the default statcube logger, creating it on first use."""
    global logger

    if logger:
        return logger

    logger = create_logger(path=path)
    return logger


def create_logger(
    level: str | None = None, path: str | None = None, format_: str | None = None
) -> Logger:
    """Create a default logger. Messages go to `path` when given, otherwise
    to the standard error stream."""
    new_logger = getLogger(DEFAULT_LOGGER_NAME)

    if level:
        new_logger.setLevel(level.upper())

    if not new_logger.handlers:
        handler = FileHandler(path) if path else StreamHandler()
        handler.setFormatter(Formatter(fmt=format_ or DEFAULT_FORMAT))
        new_logger.addHandler(handler)

    return new_logger
