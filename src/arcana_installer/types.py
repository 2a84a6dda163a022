"""Shared data types for arcana-installer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

__all__ = ["BundleOutcome", "OutcomeStatus", "SourceProvenance", "SourceRoot"]


class SourceProvenance(str, Enum):
    """Where the bundle payloads were read from."""

    LOCAL = "local"
    FETCHED = "fetched"


@dataclass(frozen=True)
class SourceRoot:
    """Filesystem location containing bundle payloads.

    Attributes:
        path: Absolute path to the directory holding one subdirectory per bundle.
        provenance: Whether the path is a local checkout or a fetched clone.
    """

    path: Path
    provenance: SourceProvenance

    def bundle_path(self, bundle: str) -> Path:
        """Get the source directory of a bundle."""
        return self.path / bundle


class OutcomeStatus(str, Enum):
    """Per-bundle result of an install or uninstall step."""

    INSTALLED = "installed"
    REMOVED = "removed"
    SKIPPED = "skipped"
    WARNED = "warned"
    FAILED = "failed"


@dataclass
class BundleOutcome:
    """Result of processing one bundle.

    Attributes:
        bundle: Bundle identifier.
        status: What happened to the bundle.
        path: Target path of the bundle (None when nothing was written).
        message: Explanation, required for anything but a clean install/removal.
    """

    bundle: str
    status: OutcomeStatus
    path: Path | None = None
    message: str | None = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        if not self.bundle:
            raise ValueError("bundle cannot be empty")
        clean = (OutcomeStatus.INSTALLED, OutcomeStatus.REMOVED)
        if self.status not in clean and not self.message:
            raise ValueError(f"status={self.status.value} requires a message")

    @property
    def is_warning(self) -> bool:
        """True for recoverable conditions that should be surfaced to the user."""
        return self.status in (OutcomeStatus.SKIPPED, OutcomeStatus.WARNED)
