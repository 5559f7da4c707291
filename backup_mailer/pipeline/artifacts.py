from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

ARCHIVE_PATTERN = "*.zip"
RESPONSE_PATTERN = "sendgrid_response_*.json"


@dataclass(frozen=True, slots=True)
class BackupArtifacts:
    """Paths produced by one run, correlated by a shared timestamp."""

    backup_dir: Path
    database: str
    timestamp: str

    @property
    def dump_dir(self) -> Path:
        return self.backup_dir / f"{self.database}_dump_{self.timestamp}"

    @property
    def archive_path(self) -> Path:
        return self.backup_dir / f"{self.database}_backup_{self.timestamp}.zip"

    @property
    def response_file(self) -> Path:
        return self.backup_dir / f"sendgrid_response_{self.timestamp}.json"
