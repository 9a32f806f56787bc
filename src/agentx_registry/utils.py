"""Type path utilities and manifest file naming.

Per DRY: Central helpers eliminate duplicated path parsing across resolver,
discovery and installer.

Both manifest naming conventions are accepted: the generic ``manifest.yaml`` /
``manifest.json`` and the type-specific ``<category>.yaml`` (``skill.yaml``,
``persona.yaml``, ...). Neither is treated as canonical.
"""

import logging
import re
from pathlib import Path

from .schema import CATEGORY_DIRS
from .schema import reference_pattern

logger = logging.getLogger(__name__)

GENERIC_MANIFEST_NAMES = ("manifest.yaml", "manifest.json")

_PLURAL_TO_CATEGORY = {plural: category for category, plural in CATEGORY_DIRS.items()}


def category_from_path(type_path: str) -> str | None:
    """Singular category for a type path.

    Examples:
        >>> category_from_path("personas/senior-java-dev")
        'persona'
        >>> category_from_path("skills/scm/git/commit-analyzer")
        'skill'
        >>> category_from_path("widgets/foo") is None
        True
    """
    plural = type_path.split("/", 1)[0]
    return _PLURAL_TO_CATEGORY.get(plural)


def name_from_path(type_path: str) -> str:
    """Display name: the type path without its category prefix.

    Examples:
        >>> name_from_path("skills/scm/git/commit-analyzer")
        'scm/git/commit-analyzer'
    """
    parts = type_path.split("/", 1)
    return parts[1] if len(parts) == 2 else type_path


def manifest_names(category: str | None) -> list[str]:
    """Candidate manifest filenames for a category, in lookup order."""
    names = list(GENERIC_MANIFEST_NAMES)
    if category:
        names.append(f"{category}.yaml")
    return names


def is_manifest_file(filename: str) -> bool:
    if filename in GENERIC_MANIFEST_NAMES:
        return True
    return filename.endswith(".yaml") and filename[: -len(".yaml")] in CATEGORY_DIRS


def find_manifest(type_dir: Path, category: str | None) -> Path | None:
    """
    Locate the manifest file inside a type directory.

    Lookup order: manifest.yaml > manifest.json > <category>.yaml

    Args:
        type_dir: Directory of a single type (e.g. catalog/skills/scm/git/commit-analyzer)
        category: Singular category, enables the type-specific filename

    Returns:
        Path to the manifest, or None if the directory holds none
    """
    if not type_dir.is_dir():
        return None
    for name in manifest_names(category):
        candidate = type_dir / name
        if candidate.is_file():
            return candidate
    return None


def type_path_from_dir(base_path: Path, type_dir: Path) -> str | None:
    """
    Type path of a directory relative to a source (or installed) root.

    Returns:
        POSIX-style type path, or None if type_dir is outside base_path or not
        under a known category directory
    """
    try:
        relative = type_dir.relative_to(base_path)
    except ValueError:
        logger.debug(f"{type_dir} is not under {base_path}")
        return None

    type_path = relative.as_posix()
    if category_from_path(type_path) is None or "/" not in type_path:
        return None
    return type_path


def is_valid_type_path(type_path: str) -> bool:
    """True if type_path names a single type: known category plus a name path.

    Examples:
        >>> is_valid_type_path("skills/scm/git/commit-analyzer")
        True
        >>> is_valid_type_path("skills")
        False
        >>> is_valid_type_path("skills/../..")
        False
    """
    category = category_from_path(type_path)
    if category is None:
        return False
    return re.match(reference_pattern(CATEGORY_DIRS[category]), type_path) is not None
