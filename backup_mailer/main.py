from __future__ import annotations

import argparse
import logging
import sys

from .config import Settings
from .errors import BackupMailerError, ConfigError
from .log import attach_log_file, configure_logging, set_terminal_level
from .pipeline.backup_run import run_backup

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Dump a MongoDB database, zip it and email it through SendGrid. "
            "All settings come from environment variables (or a .env file)."
        )
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    parse_args(argv)
    configure_logging()

    try:
        settings = Settings.from_env()
    except ConfigError as exc:
        logger.error("%s", exc)
        return 1

    set_terminal_level(settings.log_level)
    try:
        attach_log_file(settings.log_file, secrets=settings.secrets)
    except OSError as exc:
        logger.error("Cannot open log file %s: %s", settings.log_file, exc)
        return 1

    try:
        result = run_backup(settings)
    except BackupMailerError as exc:
        logger.error("%s", exc)
        return 1
    except Exception:  # noqa: BLE001
        logger.exception("Backup failed with an unexpected error")
        return 1

    if not result.cleanup.ok:
        logger.warning(
            "Backup sent, but %d artifact(s) could not be deleted.",
            len(result.cleanup.failed),
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
