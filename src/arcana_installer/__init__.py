"""Installer for Arcana skill bundles used by Claude Code."""

__version__ = "0.1.0"

# Export protocol interfaces for type hints and dependency injection
from arcana_installer.protocols import (
    FileSystem,
    InputProvider,
    SourceRepository,
)

__all__ = [
    "__version__",
    "FileSystem",
    "InputProvider",
    "SourceRepository",
]
