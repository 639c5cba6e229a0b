"""Removal of architecture-named build output folders."""

import logging
import shutil
from collections.abc import Iterable
from pathlib import Path


logger = logging.getLogger(__name__)


def wipe_build_outputs(directory: Path, architectures: Iterable[str]) -> list[Path]:
    """Delete build output folders named after target architectures.

    Matching is case-insensitive. Only the outermost match is removed, so a
    ``x64/Debug/arm64`` chain is deleted once at ``x64``.

    Args:
        directory: Sample directory that was built
        architectures: Folder names to remove (e.g., ["x64", "arm64"])

    Returns:
        Folders that were removed
    """
    names = {a.lower() for a in architectures}
    if not names:
        return []

    candidates = sorted(
        p for p in directory.rglob("*") if p.is_dir() and p.name.lower() in names
    )

    removed: list[Path] = []
    for path in candidates:
        if any(parent in removed for parent in path.parents):
            continue
        try:
            shutil.rmtree(path)
        except OSError as e:
            logger.warning("Could not remove %s: %s", path, e)
            continue
        logger.info("Removed %s", path)
        removed.append(path)

    return removed
