"""Shared test fixtures."""

from __future__ import annotations

import io
import subprocess
from collections.abc import Sequence
from pathlib import Path

import pytest
from rich.console import Console

from arcana_installer.bundles import BundleRegistry
from arcana_installer.config import InstallerSettings
from arcana_installer.context import AppContext
from arcana_installer.filesystem import RealFileSystem
from arcana_installer.tui import TUI


class ScriptedInputProvider:
    """Input provider that replays canned answers instead of reading a terminal."""

    def __init__(
        self,
        answers: Sequence[str] = (),
        confirms: Sequence[bool] = (),
        interactive: bool = True,
    ) -> None:
        self.answers = list(answers)
        self.confirms = list(confirms)
        self._interactive = interactive
        self.prompts: list[str] = []

    @property
    def interactive(self) -> bool:
        return self._interactive

    def ask(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.answers.pop(0) if self.answers else ""

    def confirm(self, prompt: str, default: bool = False) -> bool:
        self.prompts.append(prompt)
        return self.confirms.pop(0) if self.confirms else default


class FakePlatform:
    """Platform double with a configurable PATH and scripted exit codes."""

    name = "linux"

    def __init__(self, home: Path, tools: Sequence[str] = ("git", "node", "npm", "claude")) -> None:
        self.home = home
        self.tools = set(tools)
        self.exit_codes: dict[str, int] = {}
        self.outputs: dict[str, str] = {}
        self.commands: list[tuple[list[str], Path | None]] = []

    @property
    def home_dir(self) -> Path:
        return self.home

    @property
    def host_dir(self) -> Path:
        return self.home / ".claude"

    @property
    def skills_dir(self) -> Path:
        return self.host_dir / "skills"

    def executable(self, tool: str) -> str:
        return tool

    def which(self, tool: str) -> str | None:
        return f"/usr/bin/{tool}" if tool in self.tools else None

    def run(self, args, cwd=None, capture=False) -> subprocess.CompletedProcess[str]:
        command = list(args)
        self.commands.append((command, cwd))
        if command[0] not in self.tools:
            raise FileNotFoundError(command[0])
        return subprocess.CompletedProcess(
            command, self.exit_codes.get(command[0], 0), self.outputs.get(command[0], ""), ""
        )

    def install_commands(self, tool: str) -> list[list[str]] | None:
        return [["pkg", "install", tool]]

    def install_hint(self, tool: str) -> str:
        return f"Install {tool} manually"


def make_bundle(root: Path, name: str, files: dict[str, str] | None = None) -> Path:
    """Create a bundle directory with a manifest and optional extra files."""
    bundle = root / name
    bundle.mkdir(parents=True, exist_ok=True)
    (bundle / "SKILL.md").write_text(f"---\nname: {name}\n---\n\n# {name}\n")
    for relative, content in (files or {}).items():
        path = bundle / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return bundle


def snapshot(root: Path) -> dict[str, bytes]:
    """Map every file under root (relative path) to its content."""
    return {
        str(path.relative_to(root)): path.read_bytes()
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }


@pytest.fixture
def temp_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Override home directory for testing."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setattr(Path, "home", lambda: home)
    return home


@pytest.fixture
def bundle_names() -> list[str]:
    return ["alpha", "beta", "gamma"]


@pytest.fixture
def source_dir(tmp_path: Path, bundle_names: list[str]) -> Path:
    """Create a local catalog checkout with three bundles."""
    root = tmp_path / "catalog"
    make_bundle(
        root,
        "alpha",
        {
            "references/guide.md": "# Guide\n",
            "templates/page.html": "<html></html>\n",
            "node_modules/dep/index.js": "module.exports = 1;\n",
            ".DS_Store": "junk",
            "build.log": "log output\n",
        },
    )
    make_bundle(root, "beta", {"scripts/check.sh": "#!/bin/sh\necho ok\n"})
    make_bundle(root, "gamma")
    return root


@pytest.fixture
def target_dir(tmp_path: Path) -> Path:
    return tmp_path / "home" / ".claude" / "skills"


@pytest.fixture
def fake_platform(tmp_path: Path) -> FakePlatform:
    return FakePlatform(tmp_path / "home")


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def tui(output: io.StringIO) -> TUI:
    """TUI that renders into a buffer."""
    return TUI(Console(file=output, width=120, force_terminal=False))


@pytest.fixture
def scripted_input() -> ScriptedInputProvider:
    return ScriptedInputProvider()


@pytest.fixture
def settings(bundle_names: list[str], target_dir: Path, tmp_path: Path) -> InstallerSettings:
    return InstallerSettings(
        bundles=bundle_names,
        target_dir=target_dir,
        host_dir=tmp_path / "home" / ".claude",
        repo_url="https://github.com/example/skills.git",
    )


@pytest.fixture
def app_context(
    settings: InstallerSettings,
    fake_platform: FakePlatform,
    scripted_input: ScriptedInputProvider,
    tui: TUI,
    source_dir: Path,
) -> AppContext:
    """AppContext wired with test doubles and a local catalog checkout."""
    from unittest.mock import MagicMock

    return AppContext(
        settings=settings,
        registry=BundleRegistry(settings.bundles),
        platform=fake_platform,
        input=scripted_input,
        gitops=MagicMock(),
        tui=tui,
        script_dir=source_dir,
        filesystem=RealFileSystem(),
    )
