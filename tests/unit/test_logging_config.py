"""Tests for logging setup."""

import logging

from rich.console import Console
from rich.logging import RichHandler

from tabledef.logging_config import configure_logging


def _rich_handlers(logger: logging.Logger) -> list[RichHandler]:
    return [h for h in logger.handlers if isinstance(h, RichHandler)]


def test_configure_logging_levels() -> None:
    logger = configure_logging()
    assert logger.name == "tabledef"
    assert logger.level == logging.INFO

    configure_logging(debug=True)
    assert logger.level == logging.DEBUG
    assert logging.getLogger("databricks.sdk").level == logging.WARNING
    assert logging.getLogger("urllib3").level == logging.WARNING


def test_configure_logging_replaces_rich_handler() -> None:
    configure_logging()
    logger = configure_logging()

    assert len(_rich_handlers(logger)) == 1


def test_messages_reach_console() -> None:
    console = Console(record=True, width=120)
    configure_logging(console=console)

    logging.getLogger("tabledef.differ").warning("Could not fetch DDL for sales.orders")

    assert "Could not fetch DDL for sales.orders" in console.export_text()
