from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterable

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MASK = "***"


class RedactingFilter(logging.Filter):
    """Replace known secret values in rendered log messages with a mask."""

    def __init__(self, secrets: Iterable[str] = ()) -> None:
        super().__init__()
        self.secrets: set[str] = {secret for secret in secrets if secret}

    def add(self, *secrets: str) -> None:
        self.secrets.update(secret for secret in secrets if secret)

    def redact(self, text: str) -> str:
        # Longest first so a secret containing another is masked whole.
        for secret in sorted(self.secrets, key=len, reverse=True):
            text = text.replace(secret, MASK)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        if not self.secrets:
            return True
        message = record.getMessage()
        redacted = self.redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        # Formatters reuse exc_text, so rendering it here covers tracebacks too.
        if record.exc_info and not record.exc_text:
            record.exc_text = logging.Formatter().formatException(record.exc_info)
        if record.exc_text:
            record.exc_text = self.redact(record.exc_text)
        return True


_redactor = RedactingFilter()


def configure_logging(level: str = "INFO") -> None:
    """Send log lines to the terminal until the backup directory is known."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(getattr(logging, level.upper(), logging.INFO))
    handler.addFilter(_redactor)
    logging.basicConfig(
        level=logging.DEBUG,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=[handler],
        force=True,
    )


def attach_log_file(log_file: Path, secrets: Iterable[str] = ()) -> logging.Handler:
    """Append every record, DEBUG included, to ``log_file``."""
    _redactor.add(*secrets)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.addFilter(_redactor)
    logging.getLogger().addHandler(handler)
    return handler


def set_terminal_level(level: str) -> None:
    for handler in logging.getLogger().handlers:
        if type(handler) is logging.StreamHandler:
            handler.setLevel(getattr(logging, level.upper(), logging.INFO))
