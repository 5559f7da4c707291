from __future__ import annotations

import logging
from dataclasses import dataclass

from ..config import Settings
from ..errors import ArchiveError
from ..notifications.message import Attachment, build_payload
from ..notifications.sendgrid import SendGridClient
from .archive import create_archive
from .artifacts import BackupArtifacts
from .cleanup import CleanupReport, cleanup_artifacts
from .dump import run_dump
from .encode import encode_file
from .lock import RunLock
from .preflight import check_tools, required_tools
from .timestamp import run_timestamp

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PipelineResult:
    artifacts: BackupArtifacts
    archive_size: int
    status_code: int
    cleanup: CleanupReport


def run_backup(
    settings: Settings,
    timestamp: str | None = None,
    client: SendGridClient | None = None,
) -> PipelineResult:
    """Dump, archive, mail and prune, stopping at the first failing stage.

    Whatever a failed stage leaves behind (dump directory, archive, response
    file) stays on disk for manual inspection.
    """
    settings.backup_dir.mkdir(parents=True, exist_ok=True)
    check_tools(required_tools(settings))

    artifacts = BackupArtifacts(
        backup_dir=settings.backup_dir,
        database=settings.database_name,
        timestamp=timestamp or run_timestamp(),
    )
    logger.info(
        "Starting MongoDB backup%s for database '%s'",
        " (auth)" if settings.authenticated else "",
        settings.database_name,
    )

    with RunLock(settings.backup_dir):
        run_dump(settings, artifacts.dump_dir)
        archive_size = create_archive(artifacts.dump_dir, artifacts.archive_path)

        try:
            content = encode_file(artifacts.archive_path)
        except OSError as exc:
            raise ArchiveError(
                f"Could not read archive '{artifacts.archive_path}': {exc}"
            ) from exc

        attachment = Attachment(filename=artifacts.archive_path.name, content=content)
        payload = build_payload(settings, artifacts.timestamp, attachment)

        sender = client or SendGridClient(
            api_key=settings.api_key,
            url=settings.sendgrid_url,
            timeout=settings.http_timeout,
        )
        logger.info("Sending email via SendGrid to %s...", settings.to_email)
        status = sender.send(payload, artifacts.response_file)
        logger.info("Email sent successfully.")

        report = cleanup_artifacts(artifacts)

    return PipelineResult(
        artifacts=artifacts,
        archive_size=archive_size,
        status_code=status,
        cleanup=report,
    )
