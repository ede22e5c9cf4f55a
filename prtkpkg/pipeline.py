"""
Build pipeline: resolve a plan, stage the payload, run pkgbuild, import.

The two phases are split so ``prtkpkg plan`` can report everything that
would be built without touching the filesystem.
"""

from __future__ import annotations

import contextlib
import logging
import tempfile
from pathlib import Path
from typing import Callable, Iterator, Optional

import typer

from .config import BuildConfig
from .models import BuildPlan, BuildResult, LicenseTool
from .munki import MunkiImporter, RepositoryImporter, find_built_package
from .payload import assemble_payload, clear_staging, remove_stale_packages
from .pkgbuild import PackageBuilder, PkgbuildBuilder
from .provisioning import read_leid
from .prtk import locate_prtk, probe_prtk_version
from .runner import CommandRunner, run_subprocess
from .scripts import write_postinstall, write_uninstall

logger = logging.getLogger(__name__)

Echo = Callable[[str], None]


def _stderr_echo(message: str) -> None:
    typer.echo(message, err=True)


@contextlib.contextmanager
def workspace(explicit: Optional[Path] = None) -> Iterator[Path]:
    """Yield *explicit* as-is, or a temporary directory removed on exit."""
    if explicit is not None:
        explicit.mkdir(parents=True, exist_ok=True)
        yield explicit
        return
    with tempfile.TemporaryDirectory(prefix="prtkpkg-") as tmp:
        yield Path(tmp)


def plan_build(
    config: BuildConfig,
    *,
    runner: CommandRunner = run_subprocess,
    echo: Echo = _stderr_echo,
    cwd: Optional[Path] = None,
) -> BuildPlan:
    """Locate adobe_prtk, read the LEID, then the tool's bundle version."""
    prtk_path = locate_prtk(config.prtk, cwd=cwd, echo=echo)

    leid = read_leid(config.prov_path)
    echo(f'Found LEID "{leid}" from {config.prov_path}')

    version = probe_prtk_version(prtk_path, runner)
    logger.debug("adobe_prtk %s at %s", version, prtk_path)
    return BuildPlan(config=config, tool=LicenseTool(path=prtk_path, version=version), leid=leid)


def run_build(
    plan: BuildPlan,
    *,
    builder: Optional[PackageBuilder] = None,
    importer: Optional[RepositoryImporter] = None,
    echo: Echo = _stderr_echo,
) -> BuildResult:
    """Stage, package and (unless ``skip_import``) import *plan*.

    Any step failing raises and aborts the remaining ones.  With the default
    temporary workspace nothing is left behind; an explicit ``work_dir``
    keeps whatever was staged when a step failed.
    """
    config = plan.config
    builder = builder or PkgbuildBuilder()
    importer = importer or MunkiImporter()
    output_dir = config.output_dir
    output_dir.mkdir(parents=True, exist_ok=True)

    with workspace(config.work_dir) as work:
        remove_stale_packages(output_dir)
        staging = assemble_payload(plan, work)
        write_postinstall(plan, staging.scripts)

        echo(f"📦 Building {config.pkg_filename} ({plan.identifier})")
        pkg_path = builder.build(staging, plan.identifier, config.version, config.pkg_path)
        clear_staging(work)

        if config.skip_import:
            uninstall = write_uninstall(
                plan, output_dir / f"{config.pkgname}-{config.version}-uninstall.sh"
            )
            echo(f"⏭️  Skipping munkiimport; uninstall script saved to {uninstall}")
            return BuildResult(pkg_path=pkg_path, uninstall_script=uninstall)

        uninstall = write_uninstall(plan, work / "uninstall.sh")
        built = find_built_package(output_dir)
        echo(f"📥 Importing {built.name} into {config.munki_repo_subdir}")
        output = importer.import_package(built, config.munki_repo_subdir or "", uninstall)
        return BuildResult(
            pkg_path=built,
            uninstall_script=uninstall,
            imported=True,
            munkiimport_output=output,
        )


__all__ = ["plan_build", "run_build", "workspace"]
