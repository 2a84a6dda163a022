"""Tests for host configuration merging."""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import pytest
from conftest import ScriptedInputProvider

from arcana_installer.filesystem import RealFileSystem
from arcana_installer.host_config import (
    HostConfigurator,
    add_skill_permissions,
    deep_merge,
    replace_section,
)
from arcana_installer.report import Reporter
from arcana_installer.tui import TUI

START = "# Arcana Skills Configuration"
END = "# End Arcana Skills"


@pytest.fixture
def host_dir(tmp_path: Path) -> Path:
    return tmp_path / "home" / ".claude"


@pytest.fixture
def catalog(tmp_path: Path) -> Path:
    """Catalog checkout with config templates and hooks."""
    root = tmp_path / "catalog"
    config = root / "config"
    (config / "hooks").mkdir(parents=True)
    (config / "settings.template.json").write_text(
        json.dumps({"permissions": {"allow": ["Bash(ls:*)"]}, "env": {"SKILLS": "1"}})
    )
    (config / "CLAUDE.template.md").write_text(f"{START}\nUse the skills.\n{END}\n")
    (config / "hooks" / "format.sh").write_text("#!/bin/sh\n")
    (config / "statusline-command.sh").write_text("#!/bin/sh\necho status\n")
    return root


def make_configurator(
    host_dir: Path, tui: TUI, input_provider: ScriptedInputProvider | None = None
) -> HostConfigurator:
    return HostConfigurator(
        host_dir=host_dir,
        filesystem=RealFileSystem(),
        input_provider=input_provider or ScriptedInputProvider(),
        reporter=Reporter(tui),
        start_marker=START,
        end_marker=END,
    )


class TestMergeHelpers:
    """Tests for the pure merge helpers."""

    def test_deep_merge_nested(self) -> None:
        base = {"a": 1, "nested": {"keep": True, "replace": "old"}}
        override = {"nested": {"replace": "new"}, "b": 2}

        assert deep_merge(base, override) == {
            "a": 1,
            "b": 2,
            "nested": {"keep": True, "replace": "new"},
        }

    def test_deep_merge_none_keeps_base(self) -> None:
        assert deep_merge({"a": 1}, {"a": None}) == {"a": 1}

    def test_add_skill_permissions(self) -> None:
        template = {"permissions": {"allow": ["Skill(alpha)", "Bash(ls:*)"]}}

        enriched = add_skill_permissions(template, ["alpha", "beta"])

        assert enriched["permissions"]["allow"] == ["Skill(alpha)", "Bash(ls:*)", "Skill(beta)"]
        assert template["permissions"]["allow"] == ["Skill(alpha)", "Bash(ls:*)"]

    def test_replace_section(self) -> None:
        content = f"mine\n{START}\nold\n{END}\nalso mine\n"
        assert replace_section(content, START, END) == "mine\nalso mine\n"

    def test_replace_section_without_end(self) -> None:
        content = f"mine\n{START}\nold\n"
        assert replace_section(content, START, END) == "mine\n"


class TestHostConfigurator:
    """Tests for HostConfigurator."""

    def test_fresh_host_dir(self, host_dir: Path, catalog: Path, tui: TUI) -> None:
        """All files are created when nothing exists yet."""
        make_configurator(host_dir, tui).apply(catalog, ["alpha", "beta"])

        settings = json.loads((host_dir / "settings.json").read_text())
        assert settings["permissions"]["allow"] == ["Bash(ls:*)", "Skill(alpha)", "Skill(beta)"]
        assert (host_dir / "CLAUDE.md").read_text().startswith(START)
        assert (host_dir / "hooks" / "format.sh").is_file()
        assert (host_dir / "statusline-command.sh").is_file()
        assert not (host_dir / "settings.json.backup").exists()

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    def test_hooks_are_executable(self, host_dir: Path, catalog: Path, tui: TUI) -> None:
        make_configurator(host_dir, tui).apply(catalog, ["alpha"])
        assert os.access(host_dir / "hooks" / "format.sh", os.X_OK)
        assert os.access(host_dir / "statusline-command.sh", os.X_OK)

    def test_existing_settings_preserved(self, host_dir: Path, catalog: Path, tui: TUI) -> None:
        """User keys survive the merge and a backup is kept."""
        host_dir.mkdir(parents=True)
        original = json.dumps({"theme": "dark", "env": {"EDITOR": "vim"}})
        (host_dir / "settings.json").write_text(original)

        make_configurator(host_dir, tui).apply(catalog, ["alpha"])

        settings = json.loads((host_dir / "settings.json").read_text())
        assert settings["theme"] == "dark"
        assert settings["env"] == {"EDITOR": "vim", "SKILLS": "1"}
        assert "Skill(alpha)" in settings["permissions"]["allow"]
        assert (host_dir / "settings.json.backup").read_text() == original

    def test_invalid_settings_left_unchanged(
        self, host_dir: Path, catalog: Path, tui: TUI, output
    ) -> None:
        host_dir.mkdir(parents=True)
        (host_dir / "settings.json").write_text("{not json")

        make_configurator(host_dir, tui).apply(catalog, ["alpha"])

        assert (host_dir / "settings.json").read_text() == "{not json"
        assert "settings.json is not valid JSON" in output.getvalue()

    def test_claude_md_appended(self, host_dir: Path, catalog: Path, tui: TUI) -> None:
        """Without our section, the template is appended to user content."""
        host_dir.mkdir(parents=True)
        (host_dir / "CLAUDE.md").write_text("# My notes")

        make_configurator(host_dir, tui).apply(catalog, ["alpha"])

        content = (host_dir / "CLAUDE.md").read_text()
        assert content.startswith("# My notes\n\n")
        assert content.count(START) == 1

    def test_claude_md_section_replaced(self, host_dir: Path, catalog: Path, tui: TUI) -> None:
        """An existing section is replaced once the user confirms."""
        host_dir.mkdir(parents=True)
        (host_dir / "CLAUDE.md").write_text(f"# Mine\n{START}\nstale\n{END}\n")

        make_configurator(host_dir, tui, ScriptedInputProvider(confirms=[True])).apply(
            catalog, ["alpha"]
        )

        content = (host_dir / "CLAUDE.md").read_text()
        assert "stale" not in content
        assert "Use the skills." in content
        assert content.count(START) == 1

    def test_claude_md_section_kept_on_decline(self, host_dir: Path, catalog: Path, tui: TUI) -> None:
        host_dir.mkdir(parents=True)
        original = f"# Mine\n{START}\nstale\n{END}\n"
        (host_dir / "CLAUDE.md").write_text(original)

        make_configurator(host_dir, tui, ScriptedInputProvider(confirms=[False])).apply(
            catalog, ["alpha"]
        )

        assert (host_dir / "CLAUDE.md").read_text() == original

    def test_undecodable_settings_is_warning(
        self, host_dir: Path, catalog: Path, tui: TUI, output
    ) -> None:
        """A settings.json that isn't UTF-8 is left alone and later steps still run."""
        host_dir.mkdir(parents=True)
        raw = b'{"x": "\xff\xfe"}'
        (host_dir / "settings.json").write_bytes(raw)

        make_configurator(host_dir, tui).apply(catalog, ["alpha"])

        assert (host_dir / "settings.json").read_bytes() == raw
        assert (host_dir / "CLAUDE.md").is_file()
        assert (host_dir / "hooks" / "format.sh").is_file()
        assert "Could not update" in output.getvalue()

    def test_unreadable_claude_md_is_warning(self, host_dir: Path, catalog: Path, tui: TUI) -> None:
        """An OSError in one step is recorded as a warning."""
        (host_dir / "CLAUDE.md").mkdir(parents=True)
        configurator = make_configurator(host_dir, tui)

        configurator.apply(catalog, ["alpha"])

        assert len(configurator.reporter.warnings) == 1
        assert "CLAUDE.md" in configurator.reporter.warnings[0]
        assert (host_dir / "settings.json").is_file()
        assert (host_dir / "statusline-command.sh").is_file()

    def test_missing_templates_skipped(self, host_dir: Path, tmp_path: Path, tui: TUI) -> None:
        """A catalog without config/ only creates the host directory."""
        bare = tmp_path / "bare"
        bare.mkdir()

        make_configurator(host_dir, tui).apply(bare, ["alpha"])

        assert host_dir.is_dir()
        assert not (host_dir / "settings.json").exists()
        assert not (host_dir / "CLAUDE.md").exists()
