"""Logging helpers for insightspy modules."""

import logging

ROOT_LOGGER_NAME = "insightspy"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger in the insightspy namespace.

    Args:
        name: Module name (usually ``__name__``). Names outside the
              ``insightspy`` namespace are nested under it.

    Returns:
        Standard library logger.
    """
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def log_exception(
    message: str,
    logger: logging.Logger | None = None,
    level: int = logging.ERROR,
    **attributes: str | int | float | bool,
) -> None:
    """Log the exception currently being handled, with structured fields.

    Must be called from inside an ``except`` block.

    Args:
        message: The log message.
        logger: Logger to use (default: the insightspy root logger).
        level: Log level (default ERROR).
        **attributes: Extra fields attached to the log record.
    """
    (logger or get_logger()).log(level, message, exc_info=True, extra=attributes)
