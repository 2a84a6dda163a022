"""Fatal error types for the installer pipeline.

Every fatal condition carries an optional remediation hint so the CLI can tell
the user what to do next instead of printing a traceback.
"""

from __future__ import annotations

__all__ = [
    "BridgeError",
    "ConfigError",
    "FetchError",
    "InstallerError",
    "PrerequisiteError",
    "SourceError",
]


class InstallerError(Exception):
    """Base class for conditions that abort the whole operation."""

    def __init__(self, message: str, remediation: str | None = None) -> None:
        """Initialize the error.

        Args:
            message: What went wrong.
            remediation: How the user can fix it (optional).
        """
        super().__init__(message)
        self.remediation = remediation


class PrerequisiteError(InstallerError):
    """A required external tool is missing."""


class FetchError(InstallerError):
    """The bundle catalog could not be fetched from the remote repository."""


class SourceError(InstallerError):
    """The resolved source root does not contain any known bundle."""


class BridgeError(InstallerError):
    """The Linux-compatibility subsystem was requested but is unavailable."""


class ConfigError(InstallerError):
    """The configuration file could not be loaded."""
