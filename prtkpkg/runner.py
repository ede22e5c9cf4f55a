"""Thin wrapper around :func:`subprocess.run` for the external macOS tools.

Every tool the build shells out to (``otool``, ``pkgbuild``, ``munkiimport``)
goes through a :class:`CommandRunner` so tests can swap in a fake that
records argv lists instead of executing anything.
"""

from __future__ import annotations

import logging
import subprocess
from typing import List, Protocol, Sequence

from .errors import ExternalToolError, ResourceNotFoundError

logger = logging.getLogger(__name__)


class CommandRunner(Protocol):
    """Run *cmd* to completion and return its captured result."""

    def __call__(self, cmd: Sequence[str]) -> subprocess.CompletedProcess: ...


def run_subprocess(cmd: Sequence[str]) -> subprocess.CompletedProcess:
    """Default :class:`CommandRunner`: blocking, captured, never raises on status."""

    argv: List[str] = [str(part) for part in cmd]
    logger.debug("Running: %s", subprocess.list2cmdline(argv))
    try:
        result = subprocess.run(argv, capture_output=True, text=True, check=False)
    except FileNotFoundError as exc:
        raise ResourceNotFoundError(f"'{argv[0]}' is not installed or not on PATH.") from exc
    except OSError as exc:
        raise ResourceNotFoundError(f"'{argv[0]}' could not be executed: {exc.strerror or exc}") from exc
    logger.debug("%s exited with status %d", argv[0], result.returncode)
    return result


def check_result(tool: str, result: subprocess.CompletedProcess) -> subprocess.CompletedProcess:
    """Raise :class:`ExternalToolError` when *result* has a non-zero status."""

    if result.returncode != 0:
        raise ExternalToolError(tool, result.returncode, result.stderr or result.stdout or "")
    return result


__all__ = ["CommandRunner", "run_subprocess", "check_result"]
