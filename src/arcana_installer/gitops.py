"""Shallow cloning of the bundle catalog with GitPython."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError

logger = logging.getLogger(__name__)

# Conventional default branch names, tried in each other's place
FALLBACK_BRANCHES = ("main", "master")


class GitOpsError(Exception):
    """A clone could not be completed on any candidate ref."""


def candidate_refs(ref: str) -> list[str]:
    """Refs to attempt, in order, for a requested ref.

    A default branch name also tries the other default name; tags and
    feature branches are attempted exactly as given.
    """
    if ref not in FALLBACK_BRANCHES:
        return [ref]
    return [ref, *(name for name in FALLBACK_BRANCHES if name != ref)]


class GitOps:
    """Fetches catalog checkouts into a destination directory."""

    def clone(self, url: str, dest: Path, ref: str = "main") -> Path:
        """Shallow-clone url into dest.

        Args:
            url: Catalog repository URL.
            dest: Directory to create; removed again after a failed attempt.
            ref: Branch or tag to check out.

        Returns:
            dest, holding a depth-1 checkout.

        Raises:
            GitOpsError: If no candidate ref could be cloned.
        """
        failure: Exception | None = None
        for attempt in candidate_refs(ref):
            try:
                Repo.clone_from(url, dest, branch=attempt, depth=1)
            except (GitCommandError, InvalidGitRepositoryError) as e:
                failure = e
                logger.debug("Cloning %s at %s failed: %s", url, attempt, e)
                if dest.exists():
                    shutil.rmtree(dest)
                continue
            logger.debug("Cloned %s at %s into %s", url, attempt, dest)
            return dest

        raise GitOpsError(f"Could not clone {url} at '{ref}': {failure}")
