"""Installed type discovery - Convention over configuration.

Discovers what is already materialized under an installed root, based purely on
directory structure: <installed>/<category-plural>/<name-path>/<manifest>.

Per IMPLEMENTATION_PHILOSOPHY:
- Ruthless simplicity: Direct filesystem checks, no complex caching
- YAGNI: Only discover what exists now
"""

import logging
import os
from pathlib import Path

from pydantic import BaseModel
from pydantic import ConfigDict

from .schema import CATEGORY_DIRS
from .utils import category_from_path
from .utils import find_manifest
from .utils import is_manifest_file
from .utils import type_path_from_dir

logger = logging.getLogger(__name__)


class InstalledType(BaseModel):
    """A type present under the installed root (immutable data structure)."""

    model_config = ConfigDict(frozen=True)

    type_path: str
    category: str
    manifest_path: Path


def list_installed_types(installed_root: Path, category: str | None = None) -> list[InstalledType]:
    """
    List installed types.

    Args:
        installed_root: Installed root directory
        category: Optional singular category filter (e.g. "skill")

    Returns:
        Installed types sorted by type path

    Example:
        >>> for t in list_installed_types(Path("~/.agentx/installed").expanduser(), category="skill"):
        ...     print(t.type_path)
        skills/cloud/aws/ssm-lookup
        skills/scm/git/commit-analyzer
    """
    if category is not None and category not in CATEGORY_DIRS:
        raise ValueError(f"Unknown category: {category}")

    categories = [category] if category else list(CATEGORY_DIRS)
    installed: list[InstalledType] = []

    for cat in categories:
        category_dir = installed_root / CATEGORY_DIRS[cat]
        if not category_dir.is_dir():
            continue

        for dirpath, dirnames, filenames in os.walk(category_dir):
            dirnames[:] = sorted(d for d in dirnames if d != "node_modules" and not d.startswith("."))
            if not any(is_manifest_file(f) for f in filenames):
                continue

            type_dir = Path(dirpath)
            type_path = type_path_from_dir(installed_root, type_dir)
            manifest_path = find_manifest(type_dir, cat)
            if type_path is None or manifest_path is None or category_from_path(type_path) != cat:
                continue
            dirnames[:] = []
            installed.append(InstalledType(type_path=type_path, category=cat, manifest_path=manifest_path))

    installed.sort(key=lambda t: t.type_path)
    logger.debug(f"Found {len(installed)} installed types under {installed_root}")
    return installed


def is_installed(type_path: str, installed_root: Path) -> bool:
    """Check if a type has an installed copy."""
    return (installed_root / type_path).is_dir()
