"""Installer configuration.

Defaults describe the Arcana skills catalog. An optional YAML file can override
any field; CLI options take precedence over both.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from arcana_installer.errors import ConfigError

logger = logging.getLogger(__name__)

# Default location of the optional override file
CONFIG_DIR = Path.home() / ".arcana-installer"
CONFIG_ENV_VAR = "ARCANA_INSTALLER_CONFIG"

DEFAULT_BUNDLES = [
    "ios-developer-skill",
    "android-developer-skill",
    "react-developer-skill",
    "angular-developer-skill",
    "nodejs-developer-skill",
    "python-developer-skill",
    "springboot-developer-skill",
    "windows-developer-skill",
    "app-requirements-skill",
    "app-uiux-designer.skill",
]

DEFAULT_EXCLUDE = ["node_modules", ".git", ".DS_Store", "*.log"]


class InstallerSettings(BaseModel):
    """Settings for a single installer invocation."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    repo_url: str = Field(
        default="https://github.com/jrjohn/arcana-skills.git", alias="repoUrl"
    )
    ref: str = "main"
    script_base_url: str = Field(
        default="https://raw.githubusercontent.com/jrjohn/arcana-skills/main",
        alias="scriptBaseUrl",
    )
    bundles: list[str] = Field(default_factory=lambda: list(DEFAULT_BUNDLES))
    exclude: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE))
    marker_file: str = Field(default="SKILL.md", alias="markerFile")
    target_dir: Path | None = Field(default=None, alias="targetDir")
    host_dir: Path | None = Field(default=None, alias="hostDir")
    auto_install: bool = Field(default=True, alias="autoInstall")
    bridge_command: str = Field(
        default="bash <(curl -fsSL {script_url}){args}", alias="bridgeCommand"
    )
    config_marker: str = Field(default="# Arcana Skills Configuration", alias="configMarker")
    config_end_marker: str = Field(default="# End Arcana Skills", alias="configEndMarker")

    @field_validator("bundles")
    @classmethod
    def _unique_bundles(cls, value: list[str]) -> list[str]:
        seen: set[str] = set()
        for name in value:
            if not name or "/" in name or "\\" in name:
                raise ValueError(f"Invalid bundle identifier: {name!r}")
            if name in seen:
                raise ValueError(f"Duplicate bundle identifier: {name}")
            seen.add(name)
        return value

    def with_overrides(self, **overrides: Any) -> InstallerSettings:
        """Return a copy with non-None overrides applied."""
        values = {k: v for k, v in overrides.items() if v is not None}
        if not values:
            return self
        return self.model_copy(update=values)


def default_config_path() -> Path:
    """Get the override file location, honoring the environment variable."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return CONFIG_DIR / "config.yaml"


def load_settings(path: Path | None = None) -> InstallerSettings:
    """Load settings from a YAML file, falling back to defaults.

    Args:
        path: Config file to read. Defaults to default_config_path().

    Returns:
        Validated InstallerSettings.

    Raises:
        ConfigError: If the file exists but is not valid.
    """
    config_path = path or default_config_path()
    if not config_path.exists():
        logger.debug("No config file at %s, using defaults", config_path)
        return InstallerSettings()

    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(
            f"Cannot read config file {config_path}: {e}",
            remediation="Fix the YAML syntax or remove the file to use defaults.",
        ) from e

    if not isinstance(data, dict):
        raise ConfigError(
            f"Config file {config_path} must contain a mapping",
            remediation="Use 'key: value' entries at the top level.",
        )

    try:
        settings = InstallerSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(
            f"Invalid config file {config_path}: {e}",
            remediation="Check field names and values against the documented settings.",
        ) from e

    logger.debug("Loaded config from %s", config_path)
    return settings
