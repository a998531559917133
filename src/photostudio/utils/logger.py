"""Centralized logging setup."""

from __future__ import annotations

import json
import logging

from rich.console import Console
from rich.logging import RichHandler

_LIBRARY_LOGGERS = ("httpx", "httpcore", "google", "google_genai", "urllib3", "PIL")


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record, safe for messages containing quotes."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(*, verbose: bool = False, json_output: bool = False) -> None:
    """Route photostudio and SDK logs to stderr, as Rich output or JSON lines."""
    handler: logging.Handler
    if json_output:
        handler = logging.StreamHandler()
        handler.setFormatter(JsonLineFormatter())
    else:
        handler = RichHandler(
            console=Console(stderr=True),
            show_time=False,
            show_path=verbose,
            markup=False,
            rich_tracebacks=verbose,
        )
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )
    library_level = logging.INFO if verbose else logging.WARNING
    for logger_name in _LIBRARY_LOGGERS:
        logging.getLogger(logger_name).setLevel(library_level)
