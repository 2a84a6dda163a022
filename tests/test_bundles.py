"""Tests for the bundle registry."""

from __future__ import annotations

from pathlib import Path

import pytest

from arcana_installer.bundles import BundleRegistry


class TestBundleRegistry:
    """Tests for BundleRegistry."""

    def test_preserves_order(self) -> None:
        """Registry order is the menu order."""
        registry = BundleRegistry(["gamma", "alpha", "beta"])
        assert registry.bundles == ("gamma", "alpha", "beta")
        assert list(registry) == ["gamma", "alpha", "beta"]
        assert len(registry) == 3

    def test_duplicate_rejected(self) -> None:
        """A bundle identifier may appear only once."""
        with pytest.raises(ValueError, match="Duplicate bundle identifier: alpha"):
            BundleRegistry(["alpha", "beta", "alpha"])

    def test_empty_identifier_rejected(self) -> None:
        """Empty identifiers are invalid."""
        with pytest.raises(ValueError, match="cannot be empty"):
            BundleRegistry(["alpha", ""])

    def test_contains(self) -> None:
        """Membership checks use identifiers."""
        registry = BundleRegistry(["alpha"])
        assert "alpha" in registry
        assert "beta" not in registry

    def test_installed_in(self, tmp_path: Path) -> None:
        """Only registry bundles with a directory count as installed."""
        (tmp_path / "beta").mkdir()
        (tmp_path / "unrelated").mkdir()
        (tmp_path / "alpha").write_text("not a directory")
        registry = BundleRegistry(["alpha", "beta", "gamma"])

        assert registry.installed_in(tmp_path) == ["beta"]

    def test_installed_in_missing_dir(self, tmp_path: Path) -> None:
        """A missing target directory means nothing is installed."""
        registry = BundleRegistry(["alpha"])
        assert registry.installed_in(tmp_path / "missing") == []

    def test_present_in(self, source_dir: Path) -> None:
        """Bundles present in a source checkout are listed in registry order."""
        registry = BundleRegistry(["gamma", "missing", "alpha"])
        assert registry.present_in(source_dir) == ["gamma", "alpha"]
