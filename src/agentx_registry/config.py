"""Project configuration - extensions and resolution order from project.yaml.

Per KERNEL_PHILOSOPHY: Resolution order is policy. This module only loads and
edits the declaration; apps decide where project.yaml lives.

Format (YAML):
    extensions:
      - name: acme-corp
        path: extensions/acme-corp
        source: https://github.com/acme/agentx-ext.git
        branch: main
    resolution:
      order: [local, catalog, extensions]
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import yaml
from pydantic import BaseModel
from pydantic import Field
from pydantic import ValidationError

from .exceptions import ConfigError
from .exceptions import RegistryIOError

if TYPE_CHECKING:
    from .resolver import Source

logger = logging.getLogger(__name__)

PROJECT_CONFIG_FILE = "project.yaml"
DEFAULT_RESOLUTION_ORDER = ["local", "catalog", "extensions"]


class Extension(BaseModel):
    """Extension source declared in project.yaml."""

    name: str
    path: str = ""
    source: str = ""
    branch: str = ""


class ResolutionConfig(BaseModel):
    order: list[str] = Field(default_factory=lambda: list(DEFAULT_RESOLUTION_ORDER))


class ProjectConfig(BaseModel):
    """Extension list plus resolution order (declaration order is priority order)."""

    extensions: list[Extension] = Field(default_factory=list)
    resolution: ResolutionConfig = Field(default_factory=ResolutionConfig)

    @classmethod
    def load(cls, path: Path) -> "ProjectConfig":
        """
        Load project configuration.

        A missing file yields the default configuration (no extensions,
        default resolution order).

        Raises:
            RegistryIOError: If the file exists but cannot be read
            ConfigError: If the file is not valid YAML or has the wrong shape
        """
        if not path.exists():
            logger.debug(f"No project config at {path}, using defaults")
            return cls()

        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise RegistryIOError("read", path, e) from e

        try:
            data = yaml.safe_load(text) or {}
            return cls.model_validate(data)
        except (yaml.YAMLError, ValidationError) as e:
            raise ConfigError(f"Invalid project config {path}: {e}", context={"path": str(path)}) from e

    def save(self, path: Path) -> None:
        """Write configuration back to YAML."""
        data = self.model_dump(mode="json")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        except OSError as e:
            raise RegistryIOError("write", path, e) from e
        logger.debug(f"Saved project config with {len(self.extensions)} extensions to {path}")

    def find_extension(self, name: str) -> Extension | None:
        for ext in self.extensions:
            if ext.name == name:
                return ext
        return None

    def add_extension(self, extension: Extension) -> None:
        """Append an extension (lowest priority among extensions)."""
        if self.find_extension(extension.name) is not None:
            raise ConfigError(f"Extension '{extension.name}' already exists", context={"name": extension.name})
        self.extensions.append(extension)

    def remove_extension(self, name: str) -> None:
        ext = self.find_extension(name)
        if ext is None:
            raise ConfigError(f"Extension '{name}' not found in configuration", context={"name": name})
        self.extensions.remove(ext)

    def sources(self, repo_root: Path) -> "list[Source]":
        """Build the prioritized source list for this configuration."""
        from .resolver import build_sources

        return build_sources(self.resolution.order, self.extensions, repo_root)
