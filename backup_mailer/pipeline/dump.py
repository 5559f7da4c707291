from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Sequence

from ..config import Settings
from ..errors import DumpError
from ..log import MASK

logger = logging.getLogger(__name__)

SENSITIVE_FLAGS = frozenset({"--username", "--password"})


def build_dump_command(settings: Settings, dump_dir: Path) -> list[str]:
    command = [
        settings.mongodump_bin,
        "--host", settings.host,
        "--port", settings.port,
        "--db", settings.database_name,
    ]
    if settings.credentials:
        command += [
            "--username", settings.credentials.username,
            "--password", settings.credentials.password,
            "--authenticationDatabase", settings.credentials.auth_db,
        ]
    command += ["--out", str(dump_dir)]
    return command


def mask_command(command: Sequence[str]) -> str:
    masked: list[str] = []
    hide_next = False
    for arg in command:
        if hide_next:
            masked.append(MASK)
            hide_next = False
            continue
        flag, sep, _ = arg.partition("=")
        if flag in SENSITIVE_FLAGS and sep:
            masked.append(f"{flag}={MASK}")
            continue
        masked.append(arg)
        hide_next = arg in SENSITIVE_FLAGS
    return " ".join(masked)


def _log_tool_output(stream: str, label: str) -> None:
    for line in stream.splitlines():
        if line.strip():
            logger.debug("mongodump %s: %s", label, line)


def _describe_directory(directory: Path) -> None:
    logger.info("Contents of backup dir '%s':", directory)
    try:
        entries = sorted(directory.iterdir())
    except OSError as exc:
        logger.info("  (unreadable: %s)", exc)
        return
    if not entries:
        logger.info("  (empty)")
    for entry in entries:
        kind = "d" if entry.is_dir() else "-"
        size = entry.stat().st_size if entry.is_file() else 0
        logger.info("  %s %10d %s", kind, size, entry.name)


def run_dump(settings: Settings, dump_dir: Path) -> Path:
    """Export the database into ``dump_dir`` and return it.

    Raises DumpError if mongodump exits non-zero, times out, cannot be
    started, or leaves no output directory behind. A partial dump directory
    is kept for inspection.
    """
    command = build_dump_command(settings, dump_dir)
    logger.info(
        "Dumping MongoDB database '%s' into '%s'...", settings.database_name, dump_dir
    )
    logger.info("Running: %s", mask_command(command))

    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            timeout=settings.dump_timeout,
        )
    except subprocess.TimeoutExpired as exc:
        raise DumpError(
            f"mongodump exceeded the {settings.dump_timeout:g}s timeout."
        ) from exc
    except OSError as exc:
        raise DumpError(f"mongodump could not be started: {exc}") from exc

    _log_tool_output(result.stdout or "", "stdout")
    _log_tool_output(result.stderr or "", "stderr")

    if result.returncode != 0:
        raise DumpError(
            f"mongodump failed with exit code {result.returncode}, "
            f"see {settings.log_file} for details."
        )

    if not dump_dir.is_dir():
        _describe_directory(dump_dir.parent)
        raise DumpError(
            f"Dump directory '{dump_dir}' does not exist after mongodump. Aborting."
        )

    logger.info("Dump directory exists.")
    return dump_dir
