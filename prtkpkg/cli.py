"""Command-line interface for prtkpkg."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, NoReturn, Optional

import typer

from .config import BuildConfig, load_config_file, resolve_config
from .errors import PrtkPkgError
from .logging_utils import setup_logger
from .pipeline import plan_build, run_build

__version__ = "1.0.0"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _fail(exc: PrtkPkgError) -> NoReturn:
    typer.secho(f"❌ {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=exc.exit_code)


def _load(prov_paths: Optional[List[Path]], cli_args: Dict[str, Any], verbose: bool) -> BuildConfig:
    """Configure logging and resolve the build settings for *prov_paths*."""

    setup_logger(logging.DEBUG if verbose else logging.WARNING)
    file_config = load_config_file(Path.cwd())
    return resolve_config(prov_paths, cli_args, os.environ, file_config)


# ---------------------------------------------------------------------------
# CLI application
# ---------------------------------------------------------------------------

def version_callback(value: bool):
    if value:
        typer.echo(f"prtkpkg Version: {__version__}")
        raise typer.Exit()

app = typer.Typer(
    help="prtkpkg: package an Adobe CCP prov.xml license activation for Munki.",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
)

# --- root callback to expose global --version flag ---

@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show the application's version and exit.",
        callback=version_callback,
        is_eager=True,
    )
):
    """prtkpkg: package an Adobe CCP prov.xml license activation for Munki."""
    pass


PROV_ARGUMENT = typer.Argument(None, help="Path to a prov.xml file generated by CCP.")
PKGNAME_OPTION = typer.Option(None, "--pkgname", help="Package name (env: PKGNAME).")
VERSION_OPTION = typer.Option(
    None, "--pkg-version", help="Package version (env: VERSION, default: today as YYYY.MM.DD)."
)
SUBDIR_OPTION = typer.Option(
    None, "--munki-repo-subdir", help="Munki repo subdirectory (env: MUNKI_REPO_SUBDIR)."
)
DOMAIN_OPTION = typer.Option(
    None, "--reverse-domain", help="Reverse-domain identifier prefix (env: REVERSE_DOMAIN)."
)
PRTK_OPTION = typer.Option(None, "--prtk", help="Explicit adobe_prtk path (env: PRTK_PATH).")
OUTPUT_OPTION = typer.Option(None, "-o", "--output-dir", help="Where the .pkg is written.")
VERBOSE_OPTION = typer.Option(False, "--verbose", help="Log every external command.")


@app.command()
def build(
    prov_paths: Optional[List[Path]] = PROV_ARGUMENT,
    pkgname: Optional[str] = PKGNAME_OPTION,
    pkg_version: Optional[str] = VERSION_OPTION,
    munki_repo_subdir: Optional[str] = SUBDIR_OPTION,
    reverse_domain: Optional[str] = DOMAIN_OPTION,
    prtk: Optional[Path] = PRTK_OPTION,
    output_dir: Optional[Path] = OUTPUT_OPTION,
    work_dir: Optional[Path] = typer.Option(
        None, "--work-dir", help="Reusable staging workspace (default: a fresh temp dir)."
    ),
    no_import: bool = typer.Option(False, "--no-import", help="Build the .pkg but skip munkiimport."),
    verbose: bool = VERBOSE_OPTION,
):
    """Build the license package and import it into Munki."""

    cli_args = {
        "pkgname": pkgname,
        "version": pkg_version,
        "munki_repo_subdir": munki_repo_subdir,
        "reverse_domain": reverse_domain,
        "prtk": prtk,
        "output_dir": output_dir,
        "work_dir": work_dir,
        "skip_import": no_import,
    }
    try:
        config = _load(prov_paths, cli_args, verbose)
        build_plan = plan_build(config)
        result = run_build(build_plan)
    except PrtkPkgError as exc:
        _fail(exc)

    if result.munkiimport_output:
        typer.echo(result.munkiimport_output.rstrip(), err=True)
    typer.secho(f"✅ Built {result.pkg_path}", fg=typer.colors.GREEN, err=True)


@app.command()
def plan(
    prov_paths: Optional[List[Path]] = PROV_ARGUMENT,
    pkgname: Optional[str] = PKGNAME_OPTION,
    pkg_version: Optional[str] = VERSION_OPTION,
    munki_repo_subdir: Optional[str] = SUBDIR_OPTION,
    reverse_domain: Optional[str] = DOMAIN_OPTION,
    prtk: Optional[Path] = PRTK_OPTION,
    output_dir: Optional[Path] = OUTPUT_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Resolve settings, LEID and adobe_prtk version; print them as JSON."""

    cli_args = {
        "pkgname": pkgname,
        "version": pkg_version,
        "munki_repo_subdir": munki_repo_subdir,
        "reverse_domain": reverse_domain,
        "prtk": prtk,
        "output_dir": output_dir,
    }
    try:
        config = _load(prov_paths, cli_args, verbose)
        build_plan = plan_build(config)
    except PrtkPkgError as exc:
        _fail(exc)

    print(build_plan.model_dump_json(indent=2))


if __name__ == "__main__":  # pragma: no cover
    app()
