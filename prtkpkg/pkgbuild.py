"""Run ``pkgbuild`` over a staged payload."""

from __future__ import annotations

from pathlib import Path
from typing import List, Protocol

from .models import StagingTree
from .runner import CommandRunner, check_result, run_subprocess


class PackageBuilder(Protocol):
    def build(self, staging: StagingTree, identifier: str, version: str, output: Path) -> Path: ...


class PkgbuildBuilder:
    """:class:`PackageBuilder` backed by macOS ``pkgbuild``."""

    def __init__(self, runner: CommandRunner = run_subprocess, executable: str = "pkgbuild") -> None:
        self.runner = runner
        self.executable = executable

    def command(self, staging: StagingTree, identifier: str, version: str, output: Path) -> List[str]:
        return [
            self.executable,
            "--root", str(staging.root),
            "--identifier", identifier,
            "--version", version,
            "--scripts", str(staging.scripts),
            str(output),
        ]

    def build(self, staging: StagingTree, identifier: str, version: str, output: Path) -> Path:
        """Build *output*; raises :class:`ExternalToolError` on failure."""
        cmd = self.command(staging, identifier, version, output)
        check_result("pkgbuild", self.runner(cmd))
        return output


__all__ = ["PackageBuilder", "PkgbuildBuilder"]
