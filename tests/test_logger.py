from __future__ import annotations

from collections.abc import Iterator
import json
import logging

import pytest
from rich.logging import RichHandler

from photostudio.utils.logger import JsonLineFormatter, configure_logging


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_configure_logging_uses_rich_handler_by_default() -> None:
    configure_logging()

    root = logging.getLogger()
    assert root.level == logging.WARNING
    assert any(isinstance(handler, RichHandler) for handler in root.handlers)
    assert logging.getLogger("httpx").level == logging.WARNING


def test_configure_logging_verbose_json_output() -> None:
    configure_logging(verbose=True, json_output=True)

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert isinstance(root.handlers[0].formatter, JsonLineFormatter)
    assert logging.getLogger("google_genai").level == logging.INFO


def test_json_line_formatter_escapes_messages() -> None:
    record = logging.LogRecord(
        "photostudio.core.session", logging.INFO, __file__, 1, 'edit "%s" failed', ("x",), None
    )

    payload = json.loads(JsonLineFormatter().format(record))

    assert payload == {
        "level": "INFO",
        "logger": "photostudio.core.session",
        "message": 'edit "x" failed',
    }
