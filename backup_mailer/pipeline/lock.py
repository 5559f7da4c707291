from __future__ import annotations

import logging
import os
import time
from pathlib import Path

from ..errors import LockError

logger = logging.getLogger(__name__)

LOCK_FILE_NAME = ".mongo_backup.lock"
# An empty lock younger than this may still be getting its PID written.
EMPTY_LOCK_GRACE_SECONDS = 30.0


def _pid_alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        # Exists, owned by someone else.
        return True
    return True


def _read_pid(path: Path) -> int | None:
    try:
        return int(path.read_text(encoding="utf-8").strip())
    except (OSError, ValueError):
        return None


class RunLock:
    """PID file that keeps two runs from sharing one backup directory."""

    def __init__(self, backup_dir: Path) -> None:
        self.path = backup_dir / LOCK_FILE_NAME
        self._held = False

    def acquire(self) -> None:
        try:
            self._create()
        except FileExistsError:
            self._reclaim_stale()
            try:
                self._create()
            except FileExistsError as exc:
                raise LockError(f"Lost race for lock file {self.path}.") from exc
        self._held = True
        logger.debug("Acquired lock %s", self.path)

    def release(self) -> None:
        if not self._held:
            return
        self.path.unlink(missing_ok=True)
        self._held = False
        logger.debug("Released lock %s", self.path)

    def _reclaim_stale(self) -> None:
        holder = _read_pid(self.path)
        if holder is None:
            try:
                age = time.time() - self.path.stat().st_mtime
            except FileNotFoundError:
                return
            if age < EMPTY_LOCK_GRACE_SECONDS:
                raise LockError(
                    f"Lock file {self.path} is being taken by another run."
                )
        elif _pid_alive(holder):
            raise LockError(
                f"Backup directory is locked by running process {holder} ({self.path})."
            )

        # Move the file aside before deleting it, so a lock re-created by
        # another run after the check above is never removed.
        aside = self.path.with_name(f"{self.path.name}.{os.getpid()}.stale")
        try:
            os.rename(self.path, aside)
        except FileNotFoundError:
            return
        current = _read_pid(aside)
        if current != holder:
            try:
                os.link(aside, self.path)
            except FileExistsError:
                pass
            aside.unlink(missing_ok=True)
            raise LockError(
                f"Backup directory was locked by process {current} ({self.path})."
            )

        logger.warning("Removing stale lock file %s (pid %s)", self.path, holder)
        aside.unlink(missing_ok=True)

    def _create(self) -> None:
        fd = os.open(self.path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(str(os.getpid()))

    def __enter__(self) -> "RunLock":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
