"""Resolver configuration.

ResolverSettings holds the two host-supplied "format" contracts: the pair
of recognized module extensions and the index member's name.

SettingsLoader merges them from three scopes plus the environment:
- Environment (REQUIRE_INDEX_NAME, REQUIRE_EXTENSIONS) - highest priority
- Local (.require/settings.local.yaml)
- Project (.require/settings.yaml)
- User (~/.require/settings.yaml)
- Built-in defaults
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator

logger = logging.getLogger(__name__)

ENV_INDEX_NAME = "REQUIRE_INDEX_NAME"
ENV_EXTENSIONS = "REQUIRE_EXTENSIONS"


class ResolverSettings(BaseModel):
    """Extension pair and index name used by the disambiguator."""

    model_config = ConfigDict(frozen=True)

    index_name: str = Field(default="index", description="Stem of a directory's index member")
    extensions: tuple[str, str] = Field(
        default=(".a", ".b"), description="The two recognized module extensions (at most one may exist per base)"
    )

    @field_validator("index_name")
    @classmethod
    def _check_index_name(cls, value: str) -> str:
        if not value or "/" in value or value in (".", "..") or "*" in value or ":" in value:
            raise ValueError(f"Invalid index name: {value!r}")
        return value

    @field_validator("extensions")
    @classmethod
    def _check_extensions(cls, value: tuple[str, str]) -> tuple[str, str]:
        first, second = value
        for ext in value:
            if not ext.startswith(".") or len(ext) < 2 or "/" in ext:
                raise ValueError(f"Extension must look like '.ext', got {ext!r}")
        if first == second:
            raise ValueError(f"Extensions must be distinct, got {first!r} twice")
        return value

    def entry_names(self, stem: str) -> tuple[str, str]:
        """On-disk entry names a module stem may take."""
        return (stem + self.extensions[0], stem + self.extensions[1])

    def module_name(self, entry_name: str) -> str | None:
        """Strip a recognized extension from an entry name; None if it has none."""
        for ext in self.extensions:
            if entry_name.endswith(ext) and len(entry_name) > len(ext):
                return entry_name[: -len(ext)]
        return None

    def is_index_entry(self, entry_name: str) -> bool:
        return entry_name in self.entry_names(self.index_name)


class SettingsLoader:
    """Loads ResolverSettings from settings.yaml scopes and the environment."""

    def __init__(self, config_dir: Path | None = None, user_dir: Path | None = None):
        """Initialize loader with standard paths.

        Args:
            config_dir: Base directory for project/local settings (for testing).
                        If None, uses .require in current directory.
            user_dir: Base directory for user settings. If None, uses ~/.require.
        """
        if config_dir is None:
            config_dir = Path(".require")
        if user_dir is None:
            user_dir = Path.home() / ".require"

        self.user_settings_file = user_dir / "settings.yaml"
        self.project_settings_file = config_dir / "settings.yaml"
        self.local_settings_file = config_dir / "settings.local.yaml"

    def load(self) -> ResolverSettings:
        """Merge all scopes and validate.

        Raises:
            pydantic.ValidationError: Merged values are invalid
        """
        merged: dict[str, Any] = {}
        for path in (self.user_settings_file, self.project_settings_file, self.local_settings_file):
            section = self._read_section(path)
            if section:
                merged.update(section)

        merged.update(self._read_env())
        settings = ResolverSettings(**merged)
        logger.debug(f"[require:settings] index={settings.index_name} extensions={settings.extensions}")
        return settings

    def _read_section(self, path: Path) -> dict[str, Any]:
        """Read the `resolution:` section of a YAML settings file.

        Returns:
            Section dict, empty if the file or section is missing
        """
        if not path.exists():
            return {}

        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to read settings from {path}: {e}")
            return {}

        if not isinstance(data, dict) or not isinstance(data.get("resolution"), dict):
            return {}

        section = data["resolution"]
        return {key: section[key] for key in ("index_name", "extensions") if key in section}

    def _read_env(self) -> dict[str, Any]:
        overrides: dict[str, Any] = {}
        if index_name := os.getenv(ENV_INDEX_NAME):
            overrides["index_name"] = index_name
        if extensions := os.getenv(ENV_EXTENSIONS):
            overrides["extensions"] = tuple(ext.strip() for ext in extensions.split(",") if ext.strip())
        return overrides


def load_settings(config_dir: Path | None = None) -> ResolverSettings:
    """Convenience wrapper around SettingsLoader."""
    return SettingsLoader(config_dir=config_dir).load()
