from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable

from .artifacts import ARCHIVE_PATTERN, RESPONSE_PATTERN, BackupArtifacts

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CleanupReport:
    removed: list[Path] = field(default_factory=list)
    failed: list[tuple[Path, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def _remove_each(
    paths: Iterable[Path], remove: Callable[[Path], None], report: CleanupReport
) -> None:
    for path in paths:
        try:
            remove(path)
        except OSError as exc:
            logger.warning("Could not delete %s: %s", path, exc)
            report.failed.append((path, str(exc)))
        else:
            logger.debug("Deleted %s", path)
            report.removed.append(path)


def _old_archives(backup_dir: Path, keep: Path) -> list[Path]:
    return [
        path
        for path in sorted(backup_dir.glob(ARCHIVE_PATTERN))
        if path.is_file() and path.name != keep.name
    ]


def _response_files(backup_dir: Path) -> list[Path]:
    return [path for path in sorted(backup_dir.glob(RESPONSE_PATTERN)) if path.is_file()]


def cleanup_artifacts(artifacts: BackupArtifacts) -> CleanupReport:
    """Prune the backup directory after a confirmed send.

    Each deletion is attempted on its own; one failure is logged and the
    rest still run.
    """
    report = CleanupReport()
    backup_dir = artifacts.backup_dir

    logger.info("Cleaning up raw dump directory '%s'...", artifacts.dump_dir)
    if artifacts.dump_dir.exists():
        _remove_each([artifacts.dump_dir], shutil.rmtree, report)

    logger.info(
        "Deleting old ZIP backups (keeping only %s)...", artifacts.archive_path.name
    )
    _remove_each(_old_archives(backup_dir, artifacts.archive_path), Path.unlink, report)

    logger.info("Deleting all SendGrid response JSON files...")
    _remove_each(_response_files(backup_dir), Path.unlink, report)

    if report.failed:
        logger.warning(
            "Cleanup finished with %d failure(s); %d item(s) removed.",
            len(report.failed),
            len(report.removed),
        )
    else:
        logger.info("Cleanup done. Latest backup kept at: %s", artifacts.archive_path)
    return report
