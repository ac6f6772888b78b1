"""Logging setup for the tabledef CLI."""

import logging

from rich.console import Console
from rich.logging import RichHandler

# Third-party loggers stay at WARNING even with --debug
_NOISY_LOGGERS = ("databricks.sdk", "urllib3")


def configure_logging(debug: bool = False, console: Console | None = None) -> logging.Logger:
    """Route the ``tabledef`` logger through a RichHandler on stderr

    Args:
        debug: Log at DEBUG instead of INFO
        console: Console to render to (defaults to a stderr console)

    Returns:
        The configured ``tabledef`` logger
    """
    level = logging.DEBUG if debug else logging.INFO

    handler = RichHandler(
        console=console or Console(stderr=True),
        rich_tracebacks=True,
        markup=False,
        show_path=debug,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    logger = logging.getLogger("tabledef")
    for existing in list(logger.handlers):
        if isinstance(existing, RichHandler):
            logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger
