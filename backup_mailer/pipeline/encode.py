from __future__ import annotations

import base64
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# Multiple of 3 so no chunk but the last needs padding.
CHUNK_SIZE = 3 * 256 * 1024


def encode_file(path: Path, chunk_size: int = CHUNK_SIZE) -> str:
    """Return the base64 text of ``path`` on a single line."""
    if chunk_size <= 0 or chunk_size % 3:
        raise ValueError("chunk_size must be a positive multiple of 3")

    logger.info("Encoding archive to base64 for email attachment...")
    parts: list[str] = []
    with open(path, "rb") as handle:
        for chunk in iter(lambda: handle.read(chunk_size), b""):
            parts.append(base64.b64encode(chunk).decode("ascii"))
    return "".join(parts)
