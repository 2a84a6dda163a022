"""Installation of skill bundles into the target directory."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from arcana_installer.filesystem import RealFileSystem, exclusion_filter
from arcana_installer.platforms import Platform
from arcana_installer.protocols import FileSystem
from arcana_installer.types import BundleOutcome, OutcomeStatus, SourceRoot

logger = logging.getLogger(__name__)

# Manifest that signals a bundle has npm dependencies
PACKAGE_MANIFEST = "package.json"


class BundleInstaller:
    """Synchronizes bundles from a source root into the target directory.

    Reinstalling replaces the previous copy entirely: installed bundles are
    build artifacts, so local edits inside them are discarded.

    Follows Separate Use from Creation: constructor requires all dependencies.
    Use factory method `create()` for production instantiation with defaults.
    """

    def __init__(
        self,
        target_dir: Path,
        platform: Platform,
        filesystem: FileSystem,
        exclude: Sequence[str],
        marker_file: str = "SKILL.md",
    ) -> None:
        """Initialize installer with required dependencies.

        Args:
            target_dir: Installation root (one subdirectory per bundle).
            platform: OS capability provider for the dependency step.
            filesystem: Filesystem abstraction.
            exclude: Glob patterns never copied into the target.
            marker_file: Bundle manifest, always copied.
        """
        self.target_dir = target_dir
        self.platform = platform
        self.fs = filesystem
        self.exclude = list(exclude)
        self.marker_file = marker_file

    @classmethod
    def create(
        cls,
        target_dir: Path,
        platform: Platform,
        exclude: Sequence[str],
        marker_file: str = "SKILL.md",
        filesystem: FileSystem | None = None,
    ) -> BundleInstaller:
        """Factory method for production instantiation.

        Args:
            target_dir: Installation root.
            platform: OS capability provider.
            exclude: Glob patterns never copied.
            marker_file: Bundle manifest file name.
            filesystem: Optional filesystem abstraction (created if not provided).

        Returns:
            Configured BundleInstaller instance.
        """
        return cls(
            target_dir=target_dir,
            platform=platform,
            filesystem=filesystem or RealFileSystem(),
            exclude=exclude,
            marker_file=marker_file,
        )

    def ensure_target_dir(self) -> None:
        """Create the installation root if it doesn't exist."""
        if not self.fs.exists(self.target_dir):
            logger.debug("Creating skills directory %s", self.target_dir)
        self.fs.mkdir(self.target_dir, parents=True, exist_ok=True)

    def install_bundle(self, source: SourceRoot, bundle: str) -> BundleOutcome:
        """Install or reinstall one bundle.

        Args:
            source: Where bundle payloads are read from.
            bundle: Bundle identifier.

        Returns:
            Outcome for the bundle. Missing sources are skipped and a failed
            dependency step is a warning; neither raises.
        """
        source_path = source.bundle_path(bundle)
        target_path = self.target_dir / bundle

        if not self.fs.is_dir(source_path):
            return BundleOutcome(
                bundle=bundle,
                status=OutcomeStatus.SKIPPED,
                message=f"Skill not found in source: {source_path}",
            )

        try:
            self.ensure_target_dir()
            if self.fs.exists(target_path):
                logger.debug("Removing old version of %s", bundle)
                self.fs.rmtree(target_path)
            ignore = exclusion_filter(self.exclude, keep=[self.marker_file])
            self.fs.copytree(source_path, target_path, ignore=ignore)
        except OSError as e:
            logger.exception("Installation failed for %s", bundle)
            return BundleOutcome(
                bundle=bundle,
                status=OutcomeStatus.FAILED,
                message=f"Copy failed: {e}",
            )

        warning = self._install_dependencies(bundle, target_path)
        if warning:
            return BundleOutcome(
                bundle=bundle,
                status=OutcomeStatus.WARNED,
                path=target_path,
                message=warning,
            )
        return BundleOutcome(bundle=bundle, status=OutcomeStatus.INSTALLED, path=target_path)

    def _install_dependencies(self, bundle: str, target_path: Path) -> str | None:
        """Run npm install inside an installed bundle that declares packages.

        Returns:
            Warning message on failure, None on success or when not needed.
        """
        if not self.fs.exists(target_path / PACKAGE_MANIFEST):
            return None

        logger.debug("Installing npm dependencies for %s", bundle)
        try:
            result = self.platform.run(["npm", "install", "--silent"], cwd=target_path)
        except FileNotFoundError:
            return "npm not found; dependencies were not installed"
        if result.returncode != 0:
            return f"npm install exited with code {result.returncode}; dependencies may be incomplete"
        return None
