"""Type resolver - Resolve type paths against prioritized sources.

CRITICAL (KERNEL_PHILOSOPHY): Source order is app policy, not library mechanism.

Per KERNEL_PHILOSOPHY:
- "Could two teams want different behavior?" → YES (source order is policy)
- Apps build the source list (usually from project.yaml) and inject it

Override, not merge: the first source holding a type wins wholesale. No field
of a lower-priority copy ever leaks into the result.

Per AGENTS.md: Ruthless simplicity - direct filesystem checks, plain ordered list.
"""

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel
from pydantic import ConfigDict

from .config import Extension
from .exceptions import ManifestParseError
from .exceptions import RegistryIOError
from .manifest import read_metadata
from .schema import CATEGORY_DIRS
from .utils import category_from_path
from .utils import find_manifest
from .utils import is_manifest_file
from .utils import type_path_from_dir

logger = logging.getLogger(__name__)

# Directories never descended into while walking a source.
SKIPPED_DIRS = frozenset({"node_modules", ".git"})


class Source(BaseModel):
    """Named root directory searched for types."""

    model_config = ConfigDict(frozen=True)

    name: str
    base_path: Path


class ResolvedType(BaseModel):
    """A type located in a specific source (transient, never persisted)."""

    model_config = ConfigDict(frozen=True)

    type_path: str
    category: str
    source_name: str
    manifest_path: Path
    source_dir: Path
    version: str = ""
    description: str = ""
    installed: bool = False

    @property
    def name(self) -> str:
        return self.type_path.split("/", 1)[-1]


def build_sources(resolution_order: Iterable[str], extensions: Iterable[Extension], repo_root: Path) -> list[Source]:
    """
    Expand a resolution order into concrete sources.

    Tokens:
    - "local" → current working directory
    - "catalog" → repo_root/catalog
    - "extensions" → one source per extension, in declaration order
    - anything else → repo_root/<token>

    Args:
        resolution_order: Tokens from project.yaml resolution.order
        extensions: Declared extensions (their order is the override priority)
        repo_root: Repository root relative paths are joined to

    Returns:
        Sources in priority order (first = highest)

    Example:
        >>> sources = build_sources(["extensions", "catalog"], [Extension(name="acme")], Path("/repo"))
        >>> [s.name for s in sources]
        ['acme', 'catalog']
    """
    extensions = list(extensions)
    sources: list[Source] = []

    for token in resolution_order:
        if token == "local":
            sources.append(Source(name="local", base_path=Path.cwd()))
        elif token == "catalog":
            sources.append(Source(name="catalog", base_path=repo_root / "catalog"))
        elif token == "extensions":
            for ext in extensions:
                base_path = Path(ext.path) if ext.path else Path("extensions") / ext.name
                if not base_path.is_absolute():
                    base_path = repo_root / base_path
                sources.append(Source(name=ext.name, base_path=base_path))
        else:
            # Unknown tokens pass through; the caller decides what they mean
            sources.append(Source(name=token, base_path=repo_root / token))

    logger.debug(f"Built {len(sources)} sources: {[s.name for s in sources]}")
    return sources


def _resolved_from(type_path: str, category: str, source: Source, manifest_path: Path) -> ResolvedType:
    version = ""
    description = ""
    try:
        metadata = read_metadata(manifest_path)
        version = str(metadata.get("version") or "")
        description = str(metadata.get("description") or "")
    except ManifestParseError as e:
        logger.debug(f"Could not read metadata from {manifest_path}: {e}")

    return ResolvedType(
        type_path=type_path,
        category=category,
        source_name=source.name,
        manifest_path=manifest_path,
        source_dir=manifest_path.parent,
        version=version,
        description=description,
    )


def resolve_type(type_path: str, sources: list[Source]) -> ResolvedType | None:
    """
    Resolve a type path to the first source that holds it.

    "Not found" is a normal result (None), so callers can tell "doesn't exist
    anywhere" apart from "failed to read" (which raises).

    Args:
        type_path: e.g. "skills/scm/git/commit-analyzer"
        sources: Sources in priority order

    Returns:
        ResolvedType from the highest-priority source, or None

    Raises:
        RegistryIOError: If a located manifest cannot be read
    """
    category = category_from_path(type_path)
    if category is None:
        logger.debug(f"Cannot determine category of '{type_path}'")
        return None

    for source in sources:
        manifest_path = find_manifest(source.base_path / type_path, category)
        if manifest_path is None:
            continue
        logger.debug(f"Resolved '{type_path}' in source '{source.name}': {manifest_path}")
        return _resolved_from(type_path, category, source, manifest_path)

    return None


def _walk_source(source: Source) -> list[ResolvedType]:
    found: dict[str, ResolvedType] = {}

    for plural in CATEGORY_DIRS.values():
        category_dir = source.base_path / plural
        if not category_dir.is_dir():
            continue

        for dirpath, dirnames, filenames in os.walk(category_dir):
            dirnames[:] = sorted(d for d in dirnames if d not in SKIPPED_DIRS and not d.startswith("."))
            if not any(is_manifest_file(f) for f in filenames):
                continue

            type_dir = Path(dirpath)
            type_path = type_path_from_dir(source.base_path, type_dir)
            if type_path is None or type_path in found:
                continue

            category = category_from_path(type_path)
            manifest_path = find_manifest(type_dir, category)
            if manifest_path is None:
                # Only a foreign category's <name>.yaml lives here
                continue

            # Types do not nest; nothing below a type directory is another type
            dirnames[:] = []

            try:
                found[type_path] = _resolved_from(type_path, category, source, manifest_path)
            except RegistryIOError as e:
                logger.debug(f"Skipping unreadable type {type_path} in {source.name}: {e}")

    return list(found.values())


def discover_all(sources: list[Source]) -> list[ResolvedType]:
    """
    List every type available across sources.

    Deduplicated by type path: the entry from the earliest source wins and
    later copies are dropped entirely.

    Args:
        sources: Sources in priority order

    Returns:
        Resolved types, grouped by source in priority order
    """
    seen: set[str] = set()
    result: list[ResolvedType] = []

    for source in sources:
        if not source.base_path.is_dir():
            logger.debug(f"Skipping missing source '{source.name}': {source.base_path}")
            continue
        for resolved in _walk_source(source):
            if resolved.type_path in seen:
                continue
            seen.add(resolved.type_path)
            result.append(resolved)

    return result


def discover_by_category(sources: list[Source], category: str) -> list[ResolvedType]:
    """Discover types of one singular category (e.g. "skill")."""
    return [t for t in discover_all(sources) if t.category == category]
