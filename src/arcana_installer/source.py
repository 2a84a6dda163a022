"""Source resolution: where bundle payloads are read from.

A run either reads bundles from a local working copy (the installer is running
from inside a checkout) or clones the catalog into a scratch area that is
removed when the run ends, however it ends.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType
from typing import Union

from arcana_installer.bundles import BundleRegistry
from arcana_installer.errors import FetchError, SourceError
from arcana_installer.gitops import GitOpsError
from arcana_installer.protocols import SourceRepository
from arcana_installer.types import SourceProvenance, SourceRoot

logger = logging.getLogger(__name__)

SCRATCH_PREFIX = "arcana-skills-"


@dataclass(frozen=True)
class LocalCheckout:
    """Bundles are available in a local working copy."""

    path: Path


@dataclass(frozen=True)
class NeedsFetch:
    """Bundles must be cloned from the remote repository."""


SourceLocation = Union[LocalCheckout, NeedsFetch]


def detect_source(script_dir: Path, registry: BundleRegistry, marker_file: str) -> SourceLocation:
    """Decide whether script_dir is a local checkout of the catalog.

    A checkout is recognized by the marker file inside the first registry
    bundle.

    Args:
        script_dir: Directory the installer runs from.
        registry: Known bundles.
        marker_file: Manifest file name present in every bundle.

    Returns:
        LocalCheckout(script_dir) or NeedsFetch().
    """
    if len(registry) and (script_dir / registry.bundles[0] / marker_file).is_file():
        return LocalCheckout(script_dir.resolve())
    return NeedsFetch()


class ScratchArea:
    """Temporary directory that is created lazily and always removed.

    Use as a context manager around the whole pipeline; the directory is
    deleted on normal exit, on exceptions and on KeyboardInterrupt.
    """

    def __init__(self, prefix: str = SCRATCH_PREFIX) -> None:
        self._prefix = prefix
        self._path: Path | None = None

    @property
    def created(self) -> bool:
        """True once the directory exists."""
        return self._path is not None

    @property
    def path(self) -> Path:
        """Get the scratch directory, creating it on first access."""
        if self._path is None:
            self._path = Path(tempfile.mkdtemp(prefix=self._prefix))
            logger.debug("Created scratch area %s", self._path)
        return self._path

    def cleanup(self) -> None:
        """Remove the scratch directory if it was created."""
        if self._path is not None:
            shutil.rmtree(self._path, ignore_errors=True)
            logger.debug("Removed scratch area %s", self._path)
            self._path = None

    def __enter__(self) -> ScratchArea:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.cleanup()


class SourceResolver:
    """Produces the SourceRoot for a run."""

    def __init__(
        self,
        registry: BundleRegistry,
        gitops: SourceRepository,
        repo_url: str,
        ref: str = "main",
        marker_file: str = "SKILL.md",
    ) -> None:
        """Initialize the resolver.

        Args:
            registry: Known bundles.
            gitops: Git operations used for fetching.
            repo_url: Remote catalog repository.
            ref: Branch/tag to fetch.
            marker_file: Manifest file that identifies a local checkout.
        """
        self.registry = registry
        self.gitops = gitops
        self.repo_url = repo_url
        self.ref = ref
        self.marker_file = marker_file

    def locate(self, script_dir: Path, explicit_source: Path | None = None) -> SourceLocation:
        """Decide where bundles come from without touching the network."""
        if explicit_source is not None:
            return LocalCheckout(explicit_source.expanduser().resolve())
        return detect_source(script_dir, self.registry, self.marker_file)

    def resolve(self, location: SourceLocation, scratch: ScratchArea) -> SourceRoot:
        """Turn a source location into a usable SourceRoot.

        Args:
            location: Result of locate().
            scratch: Scratch area used when a fetch is needed.

        Returns:
            SourceRoot containing at least one registry bundle.

        Raises:
            FetchError: If cloning the catalog fails.
            SourceError: If the resolved directory holds no known bundle.
        """
        if isinstance(location, LocalCheckout):
            root = SourceRoot(path=location.path, provenance=SourceProvenance.LOCAL)
        else:
            root = self._fetch(scratch)
        self._validate(root)
        return root

    def _fetch(self, scratch: ScratchArea) -> SourceRoot:
        dest = scratch.path / _repo_dir_name(self.repo_url)
        try:
            self.gitops.clone(self.repo_url, dest, self.ref)
        except GitOpsError as e:
            raise FetchError(
                f"git clone of {self.repo_url} failed: {e}",
                remediation="Check your network connection and that the repository URL is reachable.",
            ) from e
        return SourceRoot(path=dest, provenance=SourceProvenance.FETCHED)

    def _validate(self, root: SourceRoot) -> None:
        if not root.path.is_dir() or not self.registry.present_in(root.path):
            raise SourceError(
                f"No known skill bundles found in {root.path}",
                remediation="Run the installer from a checkout of the skills repository "
                "or pass --source pointing at one.",
            )


def _repo_dir_name(url: str) -> str:
    """Derive a clone directory name from a repository URL."""
    name = url.rstrip("/").rsplit("/", 1)[-1]
    if name.endswith(".git"):
        name = name[: -len(".git")]
    return name or "catalog"
