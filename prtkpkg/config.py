"""Configuration loading for prtkpkg.

Settings come from four places, highest precedence first:

1. command-line options,
2. environment variables (``PKGNAME``, ``VERSION``, ``MUNKI_REPO_SUBDIR``,
   ``REVERSE_DOMAIN``, ``PRTK_PATH``),
3. an optional ``.prtkpkg.yaml`` in the current directory,
4. built-in defaults (``VERSION`` falls back to today's date).

All validation happens here, before anything on disk is touched.
"""

from __future__ import annotations

import datetime
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, Union

import yaml
from pydantic import BaseModel, ConfigDict

from .errors import ConfigurationError, ResourceNotFoundError

CONFIG_FILENAME = ".prtkpkg.yaml"

MISSING_ENV_MSG = "This environment variable must be set!"
MISSING_ARG_MSG = "This script takes a single argument: path to a prov.xml file generated by CCP."

# setting name -> environment variable
ENV_VARS: Dict[str, str] = {
    "pkgname": "PKGNAME",
    "version": "VERSION",
    "munki_repo_subdir": "MUNKI_REPO_SUBDIR",
    "reverse_domain": "REVERSE_DOMAIN",
    "prtk": "PRTK_PATH",
}


def default_version(today: Optional[datetime.date] = None) -> str:
    """Return *today* (default: the current date) as ``YYYY.MM.DD``."""
    return (today or datetime.date.today()).strftime("%Y.%m.%d")


class BuildConfig(BaseModel):
    """Validated settings for one build."""

    model_config = ConfigDict(frozen=True)

    pkgname: str
    version: str
    munki_repo_subdir: Optional[str] = None
    reverse_domain: str
    prov_path: Path
    prtk: Optional[Path] = None
    output_dir: Path = Path(".")
    work_dir: Optional[Path] = None
    skip_import: bool = False

    @property
    def identifier(self) -> str:
        """Bundle identifier of the package, also the key ``pkgutil --forget`` uses."""
        return f"{self.reverse_domain}.{self.pkgname}"

    @property
    def pkg_filename(self) -> str:
        return f"{self.pkgname}-{self.version}.pkg"

    @property
    def pkg_path(self) -> Path:
        return self.output_dir / self.pkg_filename


# ---------------------------------------------------------------------------
# YAML file
# ---------------------------------------------------------------------------


def load_config_file(directory: Path) -> Dict[str, Any]:
    """Load ``.prtkpkg.yaml`` from *directory*.

    A missing, unreadable or malformed file yields an empty ``dict``; the
    environment and CLI remain the authoritative sources.
    """
    config_file = directory / CONFIG_FILENAME
    if not config_file.is_file():
        return {}

    try:
        with config_file.open("r", encoding="utf-8") as fp:
            data = yaml.safe_load(fp) or {}
    except (yaml.YAMLError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def _pick(
    name: str,
    cli_args: Mapping[str, Any],
    environ: Mapping[str, str],
    file_config: Mapping[str, Any],
) -> Optional[str]:
    value = cli_args.get(name)
    if value not in (None, ""):
        return str(value)
    env_name = ENV_VARS.get(name)
    if env_name and environ.get(env_name):
        return environ[env_name]
    value = file_config.get(name)
    if value not in (None, ""):
        return str(value)
    return None


def _require(name: str, value: Optional[str]) -> str:
    if not value:
        raise ConfigurationError(f"{ENV_VARS[name]}: {MISSING_ENV_MSG}")
    return value


def resolve_config(
    prov_path: Union[Path, Sequence[Path], None],
    cli_args: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
    file_config: Optional[Mapping[str, Any]] = None,
    *,
    today: Optional[datetime.date] = None,
) -> BuildConfig:
    """Merge all configuration sources and validate the result.

    Checks run in a fixed order (``PKGNAME``, ``MUNKI_REPO_SUBDIR``,
    ``REVERSE_DOMAIN``, the prov argument, the prov file) and the first
    failure raises.  *prov_path* may be the raw list of positional CLI
    arguments, which must hold exactly one path.
    """
    cli_args = cli_args or {}
    environ = os.environ if environ is None else environ
    file_config = file_config or {}
    skip_import = bool(cli_args.get("skip_import"))

    pkgname = _require("pkgname", _pick("pkgname", cli_args, environ, file_config))
    version = _pick("version", cli_args, environ, file_config) or default_version(today)
    munki_repo_subdir = _pick("munki_repo_subdir", cli_args, environ, file_config)
    if not skip_import:
        munki_repo_subdir = _require("munki_repo_subdir", munki_repo_subdir)
    reverse_domain = _require(
        "reverse_domain", _pick("reverse_domain", cli_args, environ, file_config)
    )

    if isinstance(prov_path, (list, tuple)):
        if len(prov_path) != 1:
            raise ConfigurationError(MISSING_ARG_MSG)
        prov_path = Path(prov_path[0])
    if prov_path is None or str(prov_path) == "":
        raise ConfigurationError(MISSING_ARG_MSG)
    if not prov_path.exists():
        raise ResourceNotFoundError(f"Couldn't find prov file at {prov_path}!")

    prtk = _pick("prtk", cli_args, environ, file_config)
    output_dir = _pick("output_dir", cli_args, {}, file_config)
    work_dir = cli_args.get("work_dir")

    return BuildConfig(
        pkgname=pkgname,
        version=version,
        munki_repo_subdir=munki_repo_subdir,
        reverse_domain=reverse_domain,
        prov_path=prov_path,
        prtk=Path(prtk) if prtk else None,
        output_dir=Path(output_dir) if output_dir else Path("."),
        work_dir=Path(work_dir) if work_dir else None,
        skip_import=skip_import,
    )


__all__ = [
    "BuildConfig",
    "CONFIG_FILENAME",
    "default_version",
    "load_config_file",
    "resolve_config",
]
