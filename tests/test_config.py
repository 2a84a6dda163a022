"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from arcana_installer.config import (
    CONFIG_ENV_VAR,
    DEFAULT_BUNDLES,
    InstallerSettings,
    default_config_path,
    load_settings,
)
from arcana_installer.errors import ConfigError


class TestInstallerSettings:
    """Tests for InstallerSettings defaults and validation."""

    def test_defaults(self) -> None:
        """Defaults describe the Arcana catalog."""
        settings = InstallerSettings()
        assert settings.bundles == DEFAULT_BUNDLES
        assert settings.exclude == ["node_modules", ".git", ".DS_Store", "*.log"]
        assert settings.marker_file == "SKILL.md"
        assert settings.auto_install is True
        assert settings.target_dir is None

    def test_duplicate_bundles_rejected(self) -> None:
        """Duplicate identifiers fail validation."""
        with pytest.raises(ValueError, match="Duplicate bundle identifier"):
            InstallerSettings(bundles=["alpha", "alpha"])

    def test_path_like_bundle_rejected(self) -> None:
        """Identifiers must be plain directory names."""
        with pytest.raises(ValueError, match="Invalid bundle identifier"):
            InstallerSettings(bundles=["../escape/x"])

    def test_with_overrides_ignores_none(self, tmp_path: Path) -> None:
        """None overrides keep the configured value."""
        settings = InstallerSettings(auto_install=True)
        updated = settings.with_overrides(target_dir=tmp_path, auto_install=None)
        assert updated.target_dir == tmp_path
        assert updated.auto_install is True

    def test_with_overrides_no_values_returns_self(self) -> None:
        """No overrides returns the same instance."""
        settings = InstallerSettings()
        assert settings.with_overrides(target_dir=None) is settings


class TestLoadSettings:
    """Tests for load_settings."""

    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        """A missing config file is not an error."""
        settings = load_settings(tmp_path / "missing.yaml")
        assert settings == InstallerSettings()

    def test_loads_yaml_with_aliases(self, tmp_path: Path) -> None:
        """YAML keys may use camelCase aliases or field names."""
        config = tmp_path / "config.yaml"
        config.write_text(
            "bundles:\n  - alpha\n  - beta\nautoInstall: false\nref: develop\n"
        )

        settings = load_settings(config)

        assert settings.bundles == ["alpha", "beta"]
        assert settings.auto_install is False
        assert settings.ref == "develop"

    def test_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        """An empty YAML document yields defaults."""
        config = tmp_path / "config.yaml"
        config.write_text("")
        assert load_settings(config) == InstallerSettings()

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Broken YAML is a ConfigError with remediation."""
        config = tmp_path / "config.yaml"
        config.write_text("bundles: [alpha\n")

        with pytest.raises(ConfigError) as exc_info:
            load_settings(config)
        assert exc_info.value.remediation

    def test_non_mapping(self, tmp_path: Path) -> None:
        """The top level must be a mapping."""
        config = tmp_path / "config.yaml"
        config.write_text("- alpha\n- beta\n")

        with pytest.raises(ConfigError, match="must contain a mapping"):
            load_settings(config)

    def test_unknown_key(self, tmp_path: Path) -> None:
        """Unknown keys are rejected."""
        config = tmp_path / "config.yaml"
        config.write_text("colour: blue\n")

        with pytest.raises(ConfigError, match="Invalid config file"):
            load_settings(config)

    def test_env_var_overrides_default_path(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """The environment variable selects the config file."""
        config = tmp_path / "custom.yaml"
        monkeypatch.setenv(CONFIG_ENV_VAR, str(config))
        assert default_config_path() == config
