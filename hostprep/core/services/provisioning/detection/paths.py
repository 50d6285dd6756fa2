"""
L3 Detection — Enhanced PATH and binary lookup.

Tools installed moments ago (rustup into ``~/.cargo/bin``, Homebrew
into ``/opt/homebrew/bin``...) are not on the PATH the process was
started with.  ``enhanced_path()`` appends the well-known install
locations that exist on this host so lookups and spawned commands can
see them without a shell restart.

Nothing here writes to ``os.environ``.
"""

from __future__ import annotations

import logging
import os
import platform
import shutil

from hostprep.core.models.system import ToolInfo
from hostprep.core.services.provisioning.data.constants import (
    UNIX_COMMON_PATHS,
    WINDOWS_COMMON_PATHS,
)

logger = logging.getLogger(__name__)


def common_paths() -> list[str]:
    """Existing well-known tool directories, highest precedence first.

    ``~`` and ``%VAR%`` are expanded and symlinks resolved.  Missing
    directories are skipped.
    """
    if platform.system() == "Windows":
        candidates = [os.path.expandvars(p) for p in WINDOWS_COMMON_PATHS]
    else:
        candidates = [os.path.expanduser(p) for p in UNIX_COMMON_PATHS]

    found: list[str] = []
    for candidate in candidates:
        resolved = os.path.realpath(candidate)
        if os.path.isdir(resolved):
            found.append(resolved)
        else:
            logger.debug("Path %s does not exist", candidate)
    return found


def enhanced_path(base: str | None = None) -> str:
    """Inherited PATH followed by :func:`common_paths`, deduplicated."""
    if base is None:
        base = os.environ.get("PATH", "")

    entries: list[str] = []
    seen: set[str] = set()
    for entry in base.split(os.pathsep) + common_paths():
        if entry and entry not in seen:
            seen.add(entry)
            entries.append(entry)
    return os.pathsep.join(entries)


def find_tool(name: str) -> ToolInfo:
    """Look up ``name`` on the enhanced PATH."""
    if not name:
        return ToolInfo(exists=False)

    found = shutil.which(name, path=enhanced_path())
    if found:
        logger.debug("%s found at %s", name, found)
        return ToolInfo(exists=True, bin=found)

    logger.debug("%s not found in any path", name)
    return ToolInfo(exists=False)
