# file: tests/test_cli.py

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from prtkpkg.cli import app

# ---------------------------------------------------------------------------
# CLI test harness
# ---------------------------------------------------------------------------

runner = CliRunner()

ENV = {
    "PKGNAME": "Foo",
    "MUNKI_REPO_SUBDIR": "apps/AdobeCC",
    "REVERSE_DOMAIN": "org.bar",
    "VERSION": "2024.01.01",
}


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path: Path):
    """Run every CLI test from *tmp_path* with none of the build variables set."""
    for name in list(ENV) + ["PRTK_PATH"]:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def test_build_command_runs_successfully(fake_runner, prov_file: Path, prtk_binary: Path, tmp_path: Path):
    with patch("prtkpkg.runner.subprocess.run", side_effect=fake_runner):
        result = runner.invoke(app, ["build", str(prov_file)], env=ENV)

    assert result.exit_code == 0, result.output
    assert 'Found LEID "XYZ123"' in result.output
    assert "Imported Foo-2024.01.01.pkg" in result.output
    assert fake_runner.tools() == ["otool", "pkgbuild", "munkiimport"]
    assert (tmp_path / "Foo-2024.01.01.pkg").exists()
    assert fake_runner.calls[1][fake_runner.calls[1].index("--identifier") + 1] == "org.bar.Foo"


@pytest.mark.parametrize("missing", ["PKGNAME", "MUNKI_REPO_SUBDIR", "REVERSE_DOMAIN"])
def test_missing_variable_fails_before_any_work(fake_runner, prov_file: Path, prtk_binary: Path, tmp_path: Path, missing: str):
    env = {k: v for k, v in ENV.items() if k != missing}
    before = sorted(p.name for p in tmp_path.iterdir())

    with patch("prtkpkg.runner.subprocess.run", side_effect=fake_runner):
        result = runner.invoke(app, ["build", str(prov_file)], env=env)

    assert result.exit_code == 1
    assert f"{missing}: This environment variable must be set!" in result.output
    assert fake_runner.calls == []
    assert sorted(p.name for p in tmp_path.iterdir()) == before


def test_missing_argument(fake_runner):
    with patch("prtkpkg.runner.subprocess.run", side_effect=fake_runner):
        result = runner.invoke(app, ["build"], env=ENV)

    assert result.exit_code == 1
    assert "takes a single argument" in result.output
    assert fake_runner.calls == []


def test_nonexistent_prov_file(fake_runner, tmp_path: Path):
    with patch("prtkpkg.runner.subprocess.run", side_effect=fake_runner):
        result = runner.invoke(app, ["build", str(tmp_path / "missing.xml")], env=ENV)

    assert result.exit_code == 1
    assert "Couldn't find prov file" in result.output
    assert fake_runner.calls == []


def test_missing_prtk(fake_runner, prov_file: Path):
    with patch("prtkpkg.prtk.CCP_PRTK", Path("/nonexistent/adobe_prtk")), \
            patch("prtkpkg.runner.subprocess.run", side_effect=fake_runner):
        result = runner.invoke(app, ["build", str(prov_file)], env=ENV)

    assert result.exit_code == 1
    assert "No adobe_prtk found!" in result.output


def test_import_failure_propagates_exit_status(fake_runner, prov_file: Path, prtk_binary: Path):
    fake_runner.returncodes["munkiimport"] = 5

    with patch("prtkpkg.runner.subprocess.run", side_effect=fake_runner):
        result = runner.invoke(app, ["build", str(prov_file)], env=ENV)

    assert result.exit_code == 5
    assert "munkiimport failed with exit status 5" in result.output


def test_options_override_environment(fake_runner, prov_file: Path, prtk_binary: Path, tmp_path: Path):
    with patch("prtkpkg.runner.subprocess.run", side_effect=fake_runner):
        result = runner.invoke(
            app,
            ["build", str(prov_file), "--pkgname", "Bar", "--pkg-version", "1.2", "-o", "dist", "--no-import"],
            env=ENV,
        )

    assert result.exit_code == 0, result.output
    assert (tmp_path / "dist" / "Bar-1.2.pkg").exists()
    assert (tmp_path / "dist" / "Bar-1.2-uninstall.sh").exists()
    assert "munkiimport" not in fake_runner.tools()


def test_config_file_supplies_defaults(fake_runner, prov_file: Path, prtk_binary: Path, tmp_path: Path):
    (tmp_path / ".prtkpkg.yaml").write_text(
        "pkgname: FromFile\nmunki_repo_subdir: apps/files\nreverse_domain: com.file\nversion: '9'\n"
    )

    with patch("prtkpkg.runner.subprocess.run", side_effect=fake_runner):
        result = runner.invoke(app, ["plan", str(prov_file)])

    assert result.exit_code == 0, result.output
    assert '"identifier": "com.file.FromFile"' in result.output


def test_plan_command_prints_json(fake_runner, prov_file: Path, prtk_binary: Path, tmp_path: Path):
    with patch("prtkpkg.runner.subprocess.run", side_effect=fake_runner):
        result = runner.invoke(app, ["plan", str(prov_file)], env=ENV)

    assert result.exit_code == 0, result.output
    report = json.loads(result.output[result.output.index("{"):])
    assert report["leid"] == "XYZ123"
    assert report["identifier"] == "org.bar.Foo"
    assert report["installed_tool_path"] == "/usr/local/bin/adobe_prtk_3.0.0.88/adobe_prtk"
    assert report["pkg_path"] == "Foo-2024.01.01.pkg"
    assert fake_runner.tools() == ["otool"]
    assert not list(tmp_path.glob("*.pkg"))


def test_version_flag():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "prtkpkg Version" in result.output


def test_two_arguments_are_rejected(fake_runner, prov_file: Path, prtk_binary: Path, tmp_path: Path):
    with patch("prtkpkg.runner.subprocess.run", side_effect=fake_runner):
        result = runner.invoke(app, ["build", str(prov_file), str(prov_file)], env=ENV)

    assert result.exit_code == 1
    assert "takes a single argument" in result.output
    assert fake_runner.calls == []
    assert not list(tmp_path.glob("*.pkg"))


def test_verbose_logs_external_commands(fake_runner, prov_file: Path, prtk_binary: Path):
    with patch("prtkpkg.runner.subprocess.run", side_effect=fake_runner):
        first = runner.invoke(app, ["plan", str(prov_file), "--verbose"], env=ENV)
        second = runner.invoke(app, ["build", str(prov_file), "--verbose"], env=ENV)

    assert first.exit_code == 0, first.output
    assert second.exit_code == 0, second.output
    assert "Running: otool -P -X" in first.output
    assert "Running: pkgbuild --root" in second.output
    assert "Logging error" not in second.output
