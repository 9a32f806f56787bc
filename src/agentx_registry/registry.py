"""Skill registry - per-skill userdata scaffolding.

Layout (one directory per installed skill):

    <userdata>/skills/<topic>/[<vendor>/]<name>/
        tokens.env     secrets, mode 0600
        config.yaml    defaults from the manifest registry block
        state/         skill-private files
        output/        latest.json + timestamped history
        templates/     user-graduated reusable outputs

The registry outlives installs: it is created once, mutated by skill runs, and
never removed on uninstall. Initialization is idempotent - files a user may
have edited are never rewritten.
"""

import logging
import os
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path

import yaml
from dotenv import dotenv_values

from .discovery import list_installed_types
from .exceptions import ManifestValidationError
from .exceptions import RegistryIOError
from .manifest import parse_file
from .paths import SKILLS_DIR
from .platform import SECURE_FILE_MODE
from .platform import is_windows
from .platform import set_permissions
from .resolver import ResolvedType
from .schema import RegistryToken
from .schema import SkillManifest

logger = logging.getLogger(__name__)

TOKENS_FILE = "tokens.env"
CONFIG_FILE = "config.yaml"
REGISTRY_SUBDIRS = ("state", "output", "templates")


@dataclass
class RegistryStatus:
    """Health of one skill registry (for doctor-style tooling)."""

    skill: str
    registry_dir: Path
    folder_exists: bool = False
    missing_tokens: list[str] = field(default_factory=list)
    config_missing: bool = False
    config_key_count: int = 0
    permissions_ok: bool = True

    @property
    def healthy(self) -> bool:
        return self.folder_exists and not self.missing_tokens and not self.config_missing and self.permissions_ok


def skill_registry_path(userdata_root: Path, skill: SkillManifest) -> Path:
    """Registry directory of a skill: <userdata>/skills/<topic>/[<vendor>/]<name>."""
    path = userdata_root / SKILLS_DIR / skill.topic
    if skill.vendor:
        path = path / skill.vendor
    return path / skill.name


def _load_skill(manifest_path: Path) -> SkillManifest:
    manifest = parse_file(manifest_path)
    if not isinstance(manifest, SkillManifest):
        raise ManifestValidationError(
            f"Manifest {manifest_path} is not a skill (type: {manifest.type})",
            context={"manifest_path": str(manifest_path)},
        )
    return manifest


def render_tokens_env(skill_name: str, tokens: list[RegistryToken]) -> str:
    """tokens.env content: commented header, then one assignment per token."""
    lines = [
        f"# tokens.env - generated from {skill_name} manifest registry declaration",
        "# Edit this file to configure skill tokens and secrets.",
        "",
    ]
    for token in tokens:
        if token.description:
            # Block scalars span lines; each must stay a comment
            lines.extend(f"# {line}".rstrip() for line in token.description.strip().splitlines())
        if token.required:
            lines.append("# (required)")
        lines.append(f"{token.name}={token.default}")
        lines.append("")
    return "\n".join(lines)


def render_config_yaml(config: dict) -> str:
    header = (
        "# config.yaml - generated from manifest registry declaration\n"
        "# Edit this file to customize skill configuration.\n\n"
    )
    return header + yaml.safe_dump(config, sort_keys=False, default_flow_style=False)


def _write_secure(path: Path, content: str) -> None:
    # Created with 0600 from the start so secrets are never world-readable
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, SECURE_FILE_MODE)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(content)
    set_permissions(path, SECURE_FILE_MODE)


def _read_tokens(path: Path) -> dict[str, str]:
    return {key: value or "" for key, value in dotenv_values(path).items()}


def init_skill_registry(resolved: ResolvedType, userdata_root: Path) -> list[str]:
    """
    Create the userdata registry for a skill.

    - Always ensures the registry directory with state/, output/ and templates/
    - Writes tokens.env (mode 0600) if tokens are declared and none exists
    - Writes config.yaml if config defaults are declared and none exists
    - Never touches an existing tokens.env or config.yaml

    Args:
        resolved: Resolved type (non-skills are a no-op)
        userdata_root: Userdata root (injected, never read from the environment here)

    Returns:
        One warning per required token that has no value: no default in a freshly
        generated tokens.env, or empty in an existing one

    Raises:
        RegistryIOError: If a directory or file cannot be created
        ManifestParseError, ManifestValidationError: If the manifest is invalid

    Example:
        >>> warnings = init_skill_registry(resolved, Path("~/.agentx/userdata").expanduser())
        >>> warnings
        ['API_KEY required - edit .../skills/test/basic-skill/tokens.env']
    """
    if resolved.category != "skill":
        return []

    skill = _load_skill(resolved.manifest_path)
    registry_dir = skill_registry_path(userdata_root, skill)

    try:
        for subdir in REGISTRY_SUBDIRS:
            (registry_dir / subdir).mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise RegistryIOError("create registry directory", registry_dir, e) from e

    registry = skill.registry
    if registry is None:
        logger.debug(f"Skill {skill.name} declares no registry block")
        return []

    warnings: list[str] = []

    if registry.tokens:
        tokens_path = registry_dir / TOKENS_FILE
        if tokens_path.exists():
            logger.debug(f"Keeping existing {tokens_path}")
            values = _read_tokens(tokens_path)
            unset = [t.name for t in registry.tokens if t.required and not values.get(t.name)]
        else:
            try:
                _write_secure(tokens_path, render_tokens_env(skill.name, registry.tokens))
            except OSError as e:
                raise RegistryIOError("write", tokens_path, e) from e
            logger.debug(f"Generated {tokens_path} with {len(registry.tokens)} tokens")
            unset = [t.name for t in registry.tokens if t.required and not t.default]

        warnings.extend(f"{name} required - edit {tokens_path}" for name in unset)

    if registry.config:
        config_path = registry_dir / CONFIG_FILE
        if config_path.exists():
            logger.debug(f"Keeping existing {config_path}")
        else:
            try:
                config_path.write_text(render_config_yaml(registry.config), encoding="utf-8")
            except OSError as e:
                raise RegistryIOError("write", config_path, e) from e
            logger.debug(f"Generated {config_path} with {len(registry.config)} keys")

    return warnings


def check_skill_registry(manifest_path: Path, userdata_root: Path) -> RegistryStatus:
    """
    Inspect a skill's registry against its manifest declaration.

    Args:
        manifest_path: Skill manifest (usually the installed copy)
        userdata_root: Userdata root

    Returns:
        RegistryStatus describing what is missing or misconfigured
    """
    skill = _load_skill(manifest_path)
    registry_dir = skill_registry_path(userdata_root, skill)
    status = RegistryStatus(skill=skill.name, registry_dir=registry_dir)

    if not registry_dir.is_dir():
        return status
    status.folder_exists = True

    registry = skill.registry
    if registry is None:
        return status

    tokens_path = registry_dir / TOKENS_FILE
    if registry.tokens:
        values = _read_tokens(tokens_path) if tokens_path.is_file() else {}
        status.missing_tokens = [t.name for t in registry.tokens if t.required and not values.get(t.name)]

    if tokens_path.is_file() and not is_windows():
        status.permissions_ok = (tokens_path.stat().st_mode & 0o777) == SECURE_FILE_MODE

    if registry.config:
        config_path = registry_dir / CONFIG_FILE
        if not config_path.is_file():
            status.config_missing = True
        else:
            try:
                data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
                status.config_key_count = len(data) if isinstance(data, dict) else 0
            except yaml.YAMLError as e:
                logger.warning(f"Could not parse {config_path}: {e}")

    return status


def check_installed_registries(installed_root: Path, userdata_root: Path) -> list[RegistryStatus]:
    """Check the registry of every skill under installed_root."""
    return [
        check_skill_registry(installed.manifest_path, userdata_root)
        for installed in list_installed_types(installed_root, category="skill")
    ]
