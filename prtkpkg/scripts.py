"""Generate the postinstall and uninstall shell scripts.

The uninstall script only deactivates the license and forgets the package
receipt.  It leaves the versioned ``adobe_prtk`` in place so it is still
around when a deactivation has to be diagnosed on the machine, and it does
not pass ``--removeSWTag``: the SWID tags belong to the product installer.
"""

from __future__ import annotations

from pathlib import Path
from string import Template

from .models import BuildPlan

POSTINSTALL_TEMPLATE = Template(
    """#!/bin/sh

"$prtk" \\
\t--tool=GetPackagePools \\
\t--tool=VolumeSerialize \\
\t--stream \\
\t--provfile="$prov"
rm "$prov"
"""
)

UNINSTALL_TEMPLATE = Template(
    """#!/bin/sh
"$prtk" \\
\t--tool=UnSerialize \\
\t--leid="$leid" \\
\t--deactivate
/usr/sbin/pkgutil --forget "$identifier"
"""
)


def render_postinstall(plan: BuildPlan) -> str:
    return POSTINSTALL_TEMPLATE.substitute(
        prtk=plan.tool.installed_path,
        prov=plan.installed_prov_path,
    )


def render_uninstall(plan: BuildPlan) -> str:
    return UNINSTALL_TEMPLATE.substitute(
        prtk=plan.tool.installed_path,
        leid=plan.leid,
        identifier=plan.identifier,
    )


def write_postinstall(plan: BuildPlan, scripts_dir: Path) -> Path:
    """Write an executable ``postinstall`` into *scripts_dir*."""
    path = scripts_dir / "postinstall"
    path.write_text(render_postinstall(plan), encoding="utf-8")
    path.chmod(0o755)
    return path


def write_uninstall(plan: BuildPlan, destination: Path) -> Path:
    """Write the uninstall script to *destination*.

    The file is left non-executable; munkiimport embeds its contents in the
    pkginfo rather than running it.
    """
    destination.write_text(render_uninstall(plan), encoding="utf-8")
    return destination


__all__ = [
    "render_postinstall",
    "render_uninstall",
    "write_postinstall",
    "write_uninstall",
]
