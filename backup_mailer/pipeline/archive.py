from __future__ import annotations

import logging
import zipfile
from pathlib import Path

from ..errors import ArchiveError

logger = logging.getLogger(__name__)


def _write_tree(archive: zipfile.ZipFile, source_dir: Path) -> int:
    base = Path(source_dir.name)
    files = 0
    if not any(source_dir.iterdir()):
        archive.writestr(zipfile.ZipInfo(f"{base.as_posix()}/"), "")
        return files
    for path in sorted(source_dir.rglob("*")):
        arcname = base / path.relative_to(source_dir)
        if path.is_dir():
            # zipfile does not record empty directories on its own
            if not any(path.iterdir()):
                archive.writestr(zipfile.ZipInfo(f"{arcname.as_posix()}/"), "")
            continue
        archive.write(path, arcname=arcname.as_posix())
        files += 1
    return files


def create_archive(source_dir: Path, archive_path: Path) -> int:
    """Zip ``source_dir`` recursively into ``archive_path``.

    Entries are stored under the directory's own name. Returns the size of
    the archive in bytes.
    """
    logger.info("Creating ZIP archive '%s'...", archive_path)
    try:
        with zipfile.ZipFile(
            archive_path, "w", compression=zipfile.ZIP_DEFLATED
        ) as archive:
            files = _write_tree(archive, source_dir)
        size = archive_path.stat().st_size
    except (OSError, zipfile.BadZipFile, zipfile.LargeZipFile) as exc:
        raise ArchiveError(f"Failed to create ZIP archive '{archive_path}': {exc}") from exc

    logger.info("Archive created: %d file(s), %s bytes", files, f"{size:,}")
    return size
