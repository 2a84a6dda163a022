"""Wiring of the services a CLI command needs.

Commands receive an AppContext instead of building their collaborators, so a
test can hand them scripted input, a fake platform and temporary directories.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from arcana_installer.bundles import BundleRegistry
from arcana_installer.config import InstallerSettings
from arcana_installer.platforms import Platform
from arcana_installer.protocols import FileSystem, InputProvider, SourceRepository
from arcana_installer.tui import TUI


def _default_filesystem() -> FileSystem:
    """Default factory for AppContext.filesystem."""
    from arcana_installer.filesystem import RealFileSystem

    return RealFileSystem()


@dataclass
class AppContext:
    """Services and settings shared by install, uninstall and list.

    Target and host directories come from settings when configured and from
    the platform otherwise.
    """

    settings: InstallerSettings
    registry: BundleRegistry
    platform: Platform
    input: InputProvider
    gitops: SourceRepository
    tui: TUI
    script_dir: Path
    filesystem: FileSystem = field(default_factory=_default_filesystem)

    @property
    def target_dir(self) -> Path:
        """Installation root: configured value or the platform default."""
        if self.settings.target_dir is not None:
            return self.settings.target_dir.expanduser()
        return self.platform.skills_dir

    @property
    def host_dir(self) -> Path:
        """Host assistant configuration directory."""
        if self.settings.host_dir is not None:
            return self.settings.host_dir.expanduser()
        return self.platform.host_dir


def create_context(
    settings: InstallerSettings,
    script_dir: Path | None = None,
) -> AppContext:
    """Build the production context for the running operating system.

    Args:
        settings: Effective settings (config file plus CLI overrides).
        script_dir: Directory checked for a local catalog checkout.
            Defaults to the current working directory.

    Returns:
        AppContext using the terminal, GitPython and the real filesystem.
    """
    from arcana_installer.filesystem import RealFileSystem
    from arcana_installer.gitops import GitOps
    from arcana_installer.platforms import get_platform
    from arcana_installer.tui import RichInputProvider

    tui = TUI()
    return AppContext(
        settings=settings,
        registry=BundleRegistry(settings.bundles),
        platform=get_platform(),
        input=RichInputProvider(tui.console),
        gitops=GitOps(),
        tui=tui,
        script_dir=script_dir or Path.cwd(),
        filesystem=RealFileSystem(),
    )
