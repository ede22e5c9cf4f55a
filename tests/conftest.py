"""Pytest configuration: local package import plus shared fakes for the macOS tools."""

import subprocess
import sys
from pathlib import Path
from typing import Dict, List, Optional

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    # Prepend so it has priority over any globally installed package version
    sys.path.insert(0, str(PROJECT_ROOT))


PROV_XML = """<?xml version="1.0" encoding="utf-8"?>
<Provisioning version="1.0">
  <EnigmaData type="Volume">
    <SerialNumber>ENCRYPTED</SerialNumber>
  </EnigmaData>
  <CustomOverrides leid="XYZ123" />
</Provisioning>
"""

INFO_PLIST = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE plist PUBLIC "-//Apple//DTD PLIST 1.0//EN" "http://www.apple.com/DTDs/PropertyList-1.0.dtd">
<plist version="1.0">
<dict>
	<key>CFBundleIdentifier</key>
	<string>com.adobe.adobe_prtk</string>
	<key>CFBundleVersion</key>
	<string>3.0.0.88</string>
</dict>
</plist>
"""


class FakeRunner:
    """Stands in for ``subprocess.run`` / :class:`CommandRunner`.

    ``pkgbuild`` calls create the output file and snapshot the staged tree,
    ``otool`` returns :data:`INFO_PLIST`, ``munkiimport`` echoes a summary.
    """

    def __init__(self) -> None:
        self.calls: List[List[str]] = []
        self.returncodes: Dict[str, int] = {}
        self.otool_stdout = INFO_PLIST
        self.staged_files: List[str] = []
        self.postinstall: Optional[str] = None

    def tools(self) -> List[str]:
        return [Path(cmd[0]).name for cmd in self.calls]

    def __call__(self, cmd, **_kwargs) -> subprocess.CompletedProcess:
        argv = [str(part) for part in cmd]
        self.calls.append(argv)
        tool = Path(argv[0]).name
        code = self.returncodes.get(tool, 0)
        stdout = ""
        if code:
            return subprocess.CompletedProcess(argv, code, stdout="", stderr=f"{tool} exploded")

        if tool == "otool":
            stdout = self.otool_stdout
        elif tool == "pkgbuild":
            root = Path(argv[argv.index("--root") + 1])
            scripts = Path(argv[argv.index("--scripts") + 1])
            self.staged_files = sorted(
                str(p.relative_to(root)) for p in root.rglob("*") if p.is_file()
            )
            self.postinstall = (scripts / "postinstall").read_text()
            Path(argv[-1]).write_bytes(b"xar!")
        elif tool == "munkiimport":
            stdout = f"Imported {Path(argv[-1]).name}\n"
        return subprocess.CompletedProcess(argv, 0, stdout=stdout, stderr="")


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def prov_file(tmp_path: Path) -> Path:
    path = tmp_path / "prov.xml"
    path.write_text(PROV_XML)
    return path


@pytest.fixture
def prtk_binary(tmp_path: Path) -> Path:
    path = tmp_path / "adobe_prtk"
    path.write_bytes(b"\xcf\xfa\xed\xfe fake mach-o")
    path.chmod(0o755)
    return path
