"""Removal of installed skill bundles."""

from __future__ import annotations

import logging
from pathlib import Path

from arcana_installer.filesystem import RealFileSystem
from arcana_installer.protocols import FileSystem
from arcana_installer.types import BundleOutcome, OutcomeStatus

logger = logging.getLogger(__name__)


class BundleUninstaller:
    """Removes bundle directories from the target directory."""

    def __init__(self, target_dir: Path, filesystem: FileSystem | None = None) -> None:
        """Initialize uninstaller.

        Args:
            target_dir: Installation root.
            filesystem: Filesystem abstraction. Defaults to RealFileSystem.
        """
        self.target_dir = target_dir
        self.fs = filesystem or RealFileSystem()

    def uninstall_bundle(self, bundle: str) -> BundleOutcome:
        """Remove one installed bundle.

        Args:
            bundle: Bundle identifier.

        Returns:
            REMOVED, SKIPPED when it was not installed, or FAILED on I/O error.
        """
        target_path = self.target_dir / bundle
        if not self.fs.is_dir(target_path):
            return BundleOutcome(
                bundle=bundle,
                status=OutcomeStatus.SKIPPED,
                message="Skill not installed (skipping)",
            )

        try:
            self.fs.rmtree(target_path)
        except OSError as e:
            logger.exception("Uninstallation failed for %s", bundle)
            return BundleOutcome(
                bundle=bundle,
                status=OutcomeStatus.FAILED,
                message=f"Removal failed: {e}",
            )
        return BundleOutcome(bundle=bundle, status=OutcomeStatus.REMOVED, path=target_path)
