"""Data models shared across the build pipeline.

Kept in one module so the step modules and the CLI import them from a
single place.
"""

from pathlib import Path, PurePosixPath
from typing import Optional

from pydantic import BaseModel, ConfigDict, computed_field

from .config import BuildConfig

# Where adobe_prtk and the prov file land on the client machine.
INSTALL_BIN_DIR = PurePosixPath("/usr/local/bin")
PROV_INSTALL_DIR = PurePosixPath("/private/tmp")


class LicenseTool(BaseModel):
    """The located ``adobe_prtk`` executable and its bundle version."""

    model_config = ConfigDict(frozen=True)

    path: Path
    version: str

    @property
    def install_dir(self) -> PurePosixPath:
        return INSTALL_BIN_DIR / f"adobe_prtk_{self.version}"

    @property
    def installed_path(self) -> PurePosixPath:
        return self.install_dir / "adobe_prtk"


class StagingTree(BaseModel):
    """Payload root and scripts directory handed to ``pkgbuild``."""

    root: Path
    scripts: Path


class BuildPlan(BaseModel):
    """Everything resolved before the first file is written."""

    config: BuildConfig
    tool: LicenseTool
    leid: str

    @computed_field  # type: ignore[misc]
    @property
    def identifier(self) -> str:
        return self.config.identifier

    @computed_field  # type: ignore[misc]
    @property
    def pkg_path(self) -> str:
        return str(self.config.pkg_path)

    @computed_field  # type: ignore[misc]
    @property
    def installed_tool_path(self) -> str:
        return str(self.tool.installed_path)

    @property
    def installed_prov_path(self) -> PurePosixPath:
        return PROV_INSTALL_DIR / self.config.prov_path.name


class BuildResult(BaseModel):
    pkg_path: Path
    uninstall_script: Path
    imported: bool = False
    munkiimport_output: Optional[str] = None
