"""Build the ``pkgbuild`` payload root inside a workspace directory."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from .models import BuildPlan, StagingTree

logger = logging.getLogger(__name__)

ROOT_DIRNAME = "root"
SCRIPTS_DIRNAME = "Scripts"


def _relative(path) -> Path:
    """Map an absolute install path onto a path relative to the payload root."""
    return Path(*path.parts[1:])


def clear_staging(workspace: Path) -> None:
    """Remove ``root/`` and ``Scripts/`` from *workspace* if present."""
    for name in (ROOT_DIRNAME, SCRIPTS_DIRNAME):
        shutil.rmtree(workspace / name, ignore_errors=True)


def remove_stale_packages(output_dir: Path) -> None:
    """Delete every ``*.pkg`` left in *output_dir* by a previous run."""
    for stale in output_dir.glob("*.pkg"):
        logger.debug("Removing stale package %s", stale)
        if stale.is_dir():
            shutil.rmtree(stale)
        else:
            stale.unlink()


def assemble_payload(plan: BuildPlan, workspace: Path) -> StagingTree:
    """Recreate the staging tree for *plan* under *workspace*.

    Layout::

        root/usr/local/bin/adobe_prtk_<version>/adobe_prtk
        root/private/tmp/<prov file>
        Scripts/
    """
    workspace.mkdir(parents=True, exist_ok=True)
    clear_staging(workspace)

    root = workspace / ROOT_DIRNAME
    scripts = workspace / SCRIPTS_DIRNAME
    tool_dir = root / _relative(plan.tool.install_dir)
    prov_dir = root / _relative(plan.installed_prov_path.parent)

    tool_dir.mkdir(parents=True)
    prov_dir.mkdir(parents=True)
    scripts.mkdir()

    shutil.copy2(plan.tool.path, tool_dir / "adobe_prtk")
    shutil.copy2(plan.config.prov_path, prov_dir / plan.config.prov_path.name)
    logger.debug("Staged payload under %s", root)
    return StagingTree(root=root, scripts=scripts)


__all__ = ["assemble_payload", "clear_staging", "remove_stale_packages"]
