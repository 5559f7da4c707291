from __future__ import annotations

import logging
import shutil
from typing import Iterable

from ..config import Settings
from ..errors import ToolMissingError

logger = logging.getLogger(__name__)


def required_tools(settings: Settings) -> tuple[str, ...]:
    # Archiving, encoding and HTTP run in-process; only the dump is external.
    return (settings.mongodump_bin,)


def check_tools(tools: Iterable[str]) -> dict[str, str]:
    resolved: dict[str, str] = {}
    for tool in tools:
        path = shutil.which(tool)
        if path is None:
            raise ToolMissingError(tool)
        logger.debug("Found %s at %s", tool, path)
        resolved[tool] = path
    return resolved
