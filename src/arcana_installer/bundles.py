"""Bundle registry: the ordered catalog of installable skill bundles."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import Path

__all__ = ["BundleRegistry"]


class BundleRegistry:
    """Immutable, ordered catalog of bundle identifiers.

    Order defines the 1-based numbering shown in selection menus.
    """

    __slots__ = ("_bundles",)

    def __init__(self, bundles: Iterable[str]) -> None:
        """Initialize the registry.

        Args:
            bundles: Bundle identifiers in menu order.

        Raises:
            ValueError: If an identifier is empty or appears twice.
        """
        ordered: list[str] = []
        for name in bundles:
            if not name:
                raise ValueError("Bundle identifier cannot be empty")
            if name in ordered:
                raise ValueError(f"Duplicate bundle identifier: {name}")
            ordered.append(name)
        self._bundles: tuple[str, ...] = tuple(ordered)

    @property
    def bundles(self) -> tuple[str, ...]:
        """All identifiers in registry order."""
        return self._bundles

    def __iter__(self) -> Iterator[str]:
        return iter(self._bundles)

    def __len__(self) -> int:
        return len(self._bundles)

    def __contains__(self, name: object) -> bool:
        return name in self._bundles

    def __repr__(self) -> str:
        return f"BundleRegistry({list(self._bundles)!r})"

    def installed_in(self, target_dir: Path) -> list[str]:
        """List registry bundles that have a directory under target_dir.

        Args:
            target_dir: Installation root.

        Returns:
            Installed identifiers in registry order.
        """
        if not target_dir.is_dir():
            return []
        return [name for name in self._bundles if (target_dir / name).is_dir()]

    def present_in(self, source_dir: Path) -> list[str]:
        """List registry bundles that exist as subdirectories of source_dir."""
        return [name for name in self._bundles if (source_dir / name).is_dir()]
