"""Install planning - flatten a dependency tree into an ordered install list.

The plan is what a presentation layer shows for confirmation before anything
touches disk: the dependency-first install order, per-category counts, how many
types are already installed, and which external CLIs the skills need.
"""

import logging
import shutil
from collections import Counter
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path

from .deptree import DependencyNode
from .deptree import build_tree
from .exceptions import CLIMissingError
from .manifest import parse_file
from .resolver import ResolvedType
from .resolver import Source
from .schema import SkillManifest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CLIDependencyStatus:
    name: str
    available: bool


@dataclass
class InstallPlan:
    """What a single install request will do."""

    root: DependencyNode
    all_types: list[ResolvedType]
    counts: dict[str, int] = field(default_factory=dict)
    skip_count: int = 0
    cli_deps: list[CLIDependencyStatus] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.all_types)

    def is_empty(self) -> bool:
        """True when everything requested is already installed."""
        return not self.all_types

    def missing_cli_deps(self) -> list[CLIMissingError]:
        """Missing CLIs as (non-fatal) errors, for callers that report them."""
        return [CLIMissingError(dep.name) for dep in self.cli_deps if not dep.available]


def flatten(tree: DependencyNode) -> list[ResolvedType]:
    """
    Flatten a dependency tree into install order.

    Post-order traversal: every child is emitted before its parent. Installed
    nodes are left out (their descendants are still visited, so a missing
    dependency of an installed type is still picked up). A type path reached
    more than once is kept only at its first position.

    Args:
        tree: Root node from build_tree

    Returns:
        Deduplicated, dependency-first list of types to install
    """
    seen: set[str] = set()
    result: list[ResolvedType] = []

    def visit(node: DependencyNode) -> None:
        for child in node.children:
            visit(child)
        if node.installed or node.type_path in seen:
            return
        seen.add(node.type_path)
        result.append(node.resolved)

    visit(tree)
    return result


def probe_cli_dependencies(types: list[ResolvedType]) -> list[CLIDependencyStatus]:
    """
    Check PATH once per distinct CLI name declared by the skills in types.

    Returns:
        Statuses in first-declared order
    """
    statuses: dict[str, CLIDependencyStatus] = {}

    for resolved in types:
        if resolved.category != "skill":
            continue
        manifest = parse_file(resolved.manifest_path)
        if not isinstance(manifest, SkillManifest):
            continue
        for dep in manifest.cli_dependencies:
            if dep.name in statuses:
                continue
            available = shutil.which(dep.name) is not None
            if not available:
                logger.debug(f"CLI dependency '{dep.name}' not found (required by {resolved.type_path})")
            statuses[dep.name] = CLIDependencyStatus(name=dep.name, available=available)

    return list(statuses.values())


def build_install_plan(
    type_path: str,
    sources: list[Source],
    installed_root: Path,
    no_deps: bool = False,
) -> InstallPlan:
    """
    Build the install plan for a type.

    With no_deps the plan contains exactly the requested type, even if it is
    already installed (an explicit single-type request reinstalls it).

    Args:
        type_path: Type to install
        sources: Sources in priority order
        installed_root: Where installed types live
        no_deps: Skip dependency resolution

    Returns:
        InstallPlan ready for confirmation and install_plan()

    Raises:
        TypeNotFoundError, DependencyCycleError, ManifestParseError,
        ManifestValidationError: Propagated from tree building

    Example:
        >>> plan = build_install_plan("prompts/code-review", sources, installed_root)
        >>> plan.counts
        {'persona': 1, 'context': 2, 'skill': 2, 'workflow': 1, 'prompt': 1}
    """
    root = build_tree(type_path, sources, installed_root, no_deps=no_deps)

    if no_deps:
        all_types = [root.resolved]
        skip_count = 0
    else:
        all_types = flatten(root)
        skip_count = len({node.type_path for node in root.walk() if node.installed})

    counts = dict(Counter(t.category for t in all_types))
    cli_deps = probe_cli_dependencies(all_types)

    logger.debug(f"Install plan for '{type_path}': {len(all_types)} to install, {skip_count} already installed")
    return InstallPlan(root=root, all_types=all_types, counts=counts, skip_count=skip_count, cli_deps=cli_deps)
