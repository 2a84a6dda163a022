"""Merge of the host assistant's user configuration.

After bundles are installed, the catalog's config templates are merged into
the user's ~/.claude directory: skill permissions in settings.json, the
catalog section of CLAUDE.md, and editor hook scripts. Existing user settings
are preserved; only the catalog's own keys and section are replaced.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

from arcana_installer.protocols import FileSystem, InputProvider
from arcana_installer.report import Reporter

logger = logging.getLogger(__name__)

CONFIG_SUBDIR = "config"
SETTINGS_TEMPLATE = "settings.template.json"
CLAUDE_MD_TEMPLATE = "CLAUDE.template.md"
HOOKS_SUBDIR = "hooks"
STATUSLINE_SCRIPT = "statusline-command.sh"


def deep_merge(base: Any, override: Any) -> Any:
    """Recursively merge two JSON values.

    Objects merge key by key; for anything else the override wins unless it
    is None.
    """
    if isinstance(base, dict) and isinstance(override, dict):
        merged = dict(base)
        for key, value in override.items():
            merged[key] = deep_merge(base.get(key), value)
        return merged
    if override is None:
        return base
    return override


def add_skill_permissions(template: dict[str, Any], bundles: Sequence[str]) -> dict[str, Any]:
    """Add Skill(<bundle>) entries to permissions.allow.

    Existing entries keep their order; duplicates are dropped.
    """
    enriched = dict(template)
    permissions = dict(enriched.get("permissions") or {})
    allow = list(permissions.get("allow") or [])
    for entry in [f"Skill({bundle})" for bundle in bundles]:
        if entry not in allow:
            allow.append(entry)
    permissions["allow"] = allow
    enriched["permissions"] = permissions
    return enriched


def replace_section(content: str, start_marker: str, end_marker: str) -> str:
    """Remove the lines from start_marker through end_marker inclusive.

    If the end marker is missing, everything from the start marker on is
    removed.
    """
    kept: list[str] = []
    inside = False
    for line in content.splitlines(keepends=True):
        if not inside and start_marker in line:
            inside = True
            continue
        if inside:
            if end_marker in line:
                inside = False
            continue
        kept.append(line)
    return "".join(kept)


class HostConfigurator:
    """Applies the catalog's config templates to the user's host directory."""

    def __init__(
        self,
        host_dir: Path,
        filesystem: FileSystem,
        input_provider: InputProvider,
        reporter: Reporter,
        start_marker: str,
        end_marker: str,
    ) -> None:
        self.host_dir = host_dir
        self.fs = filesystem
        self.input = input_provider
        self.reporter = reporter
        self.start_marker = start_marker
        self.end_marker = end_marker

    @property
    def settings_file(self) -> Path:
        return self.host_dir / "settings.json"

    @property
    def claude_md(self) -> Path:
        return self.host_dir / "CLAUDE.md"

    @property
    def hooks_dir(self) -> Path:
        return self.host_dir / HOOKS_SUBDIR

    def apply(self, source_root: Path, bundles: Sequence[str]) -> None:
        """Run every configuration step.

        Args:
            source_root: Catalog checkout containing config/.
            bundles: Registry bundles granted Skill() permissions.
        """
        config_dir = source_root / CONFIG_SUBDIR
        self.reporter.info("Configuring Claude Code settings...")
        if not self._guarded(self.host_dir, self.fs.mkdir, self.host_dir, parents=True, exist_ok=True):
            return
        self._guarded(self.settings_file, self.merge_settings, config_dir / SETTINGS_TEMPLATE, bundles)
        self._guarded(self.claude_md, self.merge_claude_md, config_dir / CLAUDE_MD_TEMPLATE)
        self._guarded(self.hooks_dir, self.install_hooks, config_dir)

    def _guarded(self, path: Path, step: Callable[..., None], *args: Any, **kwargs: Any) -> bool:
        """Run one configuration step; I/O and decoding errors become warnings.

        Returns:
            True if the step completed.
        """
        try:
            step(*args, **kwargs)
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Configuration step for %s failed", path, exc_info=True)
            self.reporter.warn(f"Could not update {path}: {e}")
            return False
        return True

    def merge_settings(self, template_path: Path, bundles: Sequence[str]) -> None:
        """Merge the settings template into settings.json.

        The previous file is kept as settings.json.backup.
        """
        if not self.fs.exists(template_path):
            self.reporter.info(f"{SETTINGS_TEMPLATE} not found, skipping settings merge")
            return

        try:
            template = json.loads(self.fs.read_text(template_path))
        except json.JSONDecodeError as e:
            self.reporter.warn(f"{SETTINGS_TEMPLATE} is not valid JSON ({e}); skipping settings merge")
            return
        enriched = add_skill_permissions(template, bundles)

        if not self.fs.exists(self.settings_file):
            self.fs.write_text(self.settings_file, json.dumps(enriched, indent=2) + "\n")
            self.reporter.info("Created settings.json")
            return

        backup = self.settings_file.with_name("settings.json.backup")
        original = self.fs.read_text(self.settings_file)
        self.fs.write_text(backup, original)
        logger.debug("Backed up settings to %s", backup)

        try:
            current = json.loads(original) if original.strip() else {}
        except json.JSONDecodeError as e:
            self.reporter.warn(f"settings.json is not valid JSON ({e}); left unchanged")
            return

        merged = deep_merge(current, enriched)
        self.fs.write_text(self.settings_file, json.dumps(merged, indent=2) + "\n")
        self.reporter.info("Settings merged (previous file saved as settings.json.backup)")

    def merge_claude_md(self, template_path: Path) -> None:
        """Create, replace or append the catalog section of CLAUDE.md."""
        if not self.fs.exists(template_path):
            self.reporter.info(f"{CLAUDE_MD_TEMPLATE} not found, skipping CLAUDE.md merge")
            return

        template = self.fs.read_text(template_path)
        if not self.fs.exists(self.claude_md):
            self.fs.write_text(self.claude_md, template)
            self.reporter.info("Created CLAUDE.md")
            return

        content = self.fs.read_text(self.claude_md)
        if self.start_marker in content:
            if self.input.interactive and not self.input.confirm(
                "  Update existing skills config in CLAUDE.md?", default=False
            ):
                self.reporter.info("Keeping existing CLAUDE.md config")
                return
            content = replace_section(content, self.start_marker, self.end_marker)

        if content and not content.endswith("\n"):
            content += "\n"
        self.fs.write_text(self.claude_md, f"{content}\n{template}")
        self.reporter.info("CLAUDE.md updated")

    def install_hooks(self, config_dir: Path) -> None:
        """Copy hook scripts and the status line command."""
        hooks_source = config_dir / HOOKS_SUBDIR
        if self.fs.is_dir(hooks_source):
            self.fs.mkdir(self.hooks_dir, parents=True, exist_ok=True)
            for hook in sorted(hooks_source.glob("*.sh")):
                destination = self.hooks_dir / hook.name
                self.fs.copy_file(hook, destination)
                self.fs.make_executable(destination)
                logger.debug("Installed hook %s", hook.name)

        statusline = config_dir / STATUSLINE_SCRIPT
        if self.fs.exists(statusline):
            destination = self.host_dir / STATUSLINE_SCRIPT
            self.fs.copy_file(statusline, destination)
            self.fs.make_executable(destination)
            logger.debug("Installed status line command")
