"""Import the built package into a Munki repository."""

from __future__ import annotations

from pathlib import Path
from typing import List, Protocol

from .errors import ResourceNotFoundError
from .runner import CommandRunner, check_result, run_subprocess


class RepositoryImporter(Protocol):
    def import_package(self, pkg_path: Path, subdirectory: str, uninstall_script: Path) -> str: ...


def find_built_package(output_dir: Path) -> Path:
    """Return the single ``*.pkg`` in *output_dir*."""
    found = sorted(output_dir.glob("*.pkg"))
    if len(found) != 1:
        raise ResourceNotFoundError(
            f"Expected exactly one .pkg in {output_dir}, found {len(found)}."
        )
    return found[0]


class MunkiImporter:
    """:class:`RepositoryImporter` backed by ``munkiimport``."""

    def __init__(self, runner: CommandRunner = run_subprocess, executable: str = "munkiimport") -> None:
        self.runner = runner
        self.executable = executable

    def command(self, pkg_path: Path, subdirectory: str, uninstall_script: Path) -> List[str]:
        return [
            self.executable,
            "--nointeractive",
            "--subdirectory", subdirectory,
            "--uninstall-method", "uninstall_script",
            "--uninstall-script", str(uninstall_script),
            str(pkg_path),
        ]

    def import_package(self, pkg_path: Path, subdirectory: str, uninstall_script: Path) -> str:
        """Run munkiimport and return its stdout."""
        cmd = self.command(pkg_path, subdirectory, uninstall_script)
        result = check_result("munkiimport", self.runner(cmd))
        return result.stdout or ""


__all__ = ["RepositoryImporter", "MunkiImporter", "find_built_package"]
