"""Logging setup shared by every module.

Modules call ``get_logger(__name__)``; the CLI calls ``configure_logging`` once
to attach a rich handler to the package logger.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "dart_data_class"

_DEFAULT_FORMAT = "%(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a logger namespaced under the package logger.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        Configured ``logging.Logger`` instance.
    """
    if not name.startswith(PACKAGE_LOGGER):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def configure_logging(
    level: int | str = logging.WARNING,
    console: Console | None = None,
    show_path: bool = False,
) -> logging.Logger:
    """Attach a ``RichHandler`` to the package logger.

    Calling this again replaces the previously installed handler instead of
    stacking a second one.

    Args:
        level: Log level name or number.
        console: Console to log to (stderr console when omitted).
        show_path: Whether rich should show the emitting module path.

    Returns:
        The package logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=show_path,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT, datefmt="[%X]"))

    logger.addHandler(handler)
    logger.setLevel(level if isinstance(level, int) else level.upper())
    logger.propagate = False
    return logger
