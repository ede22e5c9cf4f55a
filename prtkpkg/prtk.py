"""Locate ``adobe_prtk`` and read its bundle version.

``adobe_prtk`` ships with Creative Cloud Packager.  A copy in the current
directory wins over the CCP installation.
"""

from __future__ import annotations

import os
import plistlib
import re
from pathlib import Path
from typing import Callable, List, Optional
from xml.parsers.expat import ExpatError

import typer

from .errors import ExtractionError, ResourceNotFoundError
from .runner import CommandRunner, check_result, run_subprocess

PRTK_NAME = "adobe_prtk"
CCP_PRTK = Path("/Applications/Utilities/Adobe Application Manager/CCP/utilities/APTEE/adobe_prtk")

# The version becomes part of an install path, so only plain tokens pass.
VERSION_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


def _is_executable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


def locate_prtk(
    explicit: Optional[Path] = None,
    *,
    cwd: Optional[Path] = None,
    fallback: Optional[Path] = None,
    echo: Callable[[str], None] = lambda msg: typer.echo(msg, err=True),
) -> Path:
    """Return the path of an executable ``adobe_prtk``.

    With *explicit* only that path is checked.  Otherwise ``./adobe_prtk``
    is tried first, then *fallback* (default: the CCP installation).
    """
    if explicit is not None:
        if _is_executable(explicit):
            return explicit
        raise ResourceNotFoundError(f"No executable adobe_prtk found at {explicit}!")

    local_copy = (cwd or Path.cwd()) / PRTK_NAME
    if _is_executable(local_copy):
        return local_copy

    echo("adobe_prtk not found in current directory, trying CCP installation path..")
    fallback = fallback or CCP_PRTK
    if _is_executable(fallback):
        return fallback
    raise ResourceNotFoundError(
        "No adobe_prtk found! Either install CCP or copy adobe_prtk to this script's directory."
    )


def parse_bundle_version(info_plist: str) -> str:
    """Return a validated ``CFBundleVersion`` from *info_plist* text."""

    try:
        info = plistlib.loads(info_plist.strip().encode("utf-8"))
    except (plistlib.InvalidFileException, ExpatError, ValueError) as exc:
        raise ExtractionError("Could not parse the Info.plist embedded in adobe_prtk.") from exc

    version = str(info.get("CFBundleVersion", "")).strip() if isinstance(info, dict) else ""
    if not version:
        raise ExtractionError("adobe_prtk's Info.plist has no CFBundleVersion.")
    if not VERSION_RE.match(version):
        raise ExtractionError(f"Refusing to use unexpected adobe_prtk version {version!r} in a path.")
    return version


def probe_prtk_version(prtk_path: Path, runner: CommandRunner = run_subprocess) -> str:
    """Read ``CFBundleVersion`` from the ``__info_plist`` section of *prtk_path*."""

    cmd: List[str] = ["otool", "-P", "-X", str(prtk_path)]
    result = check_result("otool", runner(cmd))
    return parse_bundle_version(result.stdout)


__all__ = [
    "CCP_PRTK",
    "locate_prtk",
    "parse_bundle_version",
    "probe_prtk_version",
]
