from __future__ import annotations

from pathlib import Path


class BackupMailerError(RuntimeError):
    """Base class for failures that abort a backup run."""


class ConfigError(BackupMailerError):
    """A mandatory setting is missing or an optional one is malformed."""


class ToolMissingError(BackupMailerError):
    def __init__(self, tool: str) -> None:
        super().__init__(f"'{tool}' is not installed or not in PATH.")
        self.tool = tool


class LockError(BackupMailerError):
    """Another run holds the backup directory."""


class DumpError(BackupMailerError):
    pass


class ArchiveError(BackupMailerError):
    pass


class NotifyError(BackupMailerError):
    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_file: Path | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response_file = response_file
