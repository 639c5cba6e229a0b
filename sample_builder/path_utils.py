"""Path helpers: sample names, solution lookup and WSL path conversion."""

import os
import re
import sys
from pathlib import Path
from typing import Optional


# Matches WSL mount paths: /mnt/<single drive letter>/...
_WSL_PATH_PATTERN = re.compile(r"^/mnt/([a-zA-Z])(/.*)?$")


def derive_sample_name(directory: Path, cwd: Optional[Path] = None) -> str:
    """Derive a sample name from its directory.

    The directory is made relative to the working directory, path
    separators become dots and the result is lower-cased, e.g.
    ``.\\usb\\kmdf_fx2`` -> ``usb.kmdf_fx2``. The working directory itself
    is named after its last path component.

    Args:
        directory: Sample directory (absolute or relative)
        cwd: Directory to resolve against (default: current directory)

    Returns:
        The derived sample name
    """
    base = cwd or Path.cwd()
    try:
        relative = os.path.relpath(directory, base)
    except ValueError:
        # Different drive on Windows, no relative form exists
        relative = str(directory)

    name = relative.replace("\\", ".").replace("/", ".").lower().strip(".")
    if not name:
        # Building the working directory itself
        name = Path(os.path.abspath(os.path.join(base, directory))).name.lower()
    return name


def find_solution_file(directory: Path) -> Optional[Path]:
    """Return the first ``*.sln`` file directly inside ``directory``.

    Args:
        directory: Directory to scan (not recursive)

    Returns:
        Path to the solution file, or None if there is none
    """
    solutions = sorted(p for p in directory.glob("*.sln") if p.is_file())
    return solutions[0] if solutions else None


def convert_wsl_to_windows_path(path_str: str) -> str:
    """Map a sample or log directory sent from WSL onto its Windows drive.

    ``/mnt/d/Windows-driver-samples/usb/kmdf_fx2`` becomes
    ``D:\\Windows-driver-samples\\usb\\kmdf_fx2`` so MSBuild can use it.
    Only applies when the server itself runs on Windows.
    """
    if sys.platform != "win32":
        return path_str

    match = _WSL_PATH_PATTERN.match(path_str)
    if match is None:
        return path_str

    drive, tail = match.groups()
    return drive.upper() + ":" + (tail or "").replace("/", "\\")
