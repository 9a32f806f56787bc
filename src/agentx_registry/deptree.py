"""Dependency tree construction.

Walks declared references recursively. The category convention
(context → persona → skill → workflow → prompt) makes the graph a DAG in
practice, but authoring mistakes can still introduce cycles, so the builder
keeps the current recursion stack and fails on re-entry.

Diamonds are fine here: a shared dependency simply appears under each parent.
Collapsing duplicates is the planner's job.
"""

import logging
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path

from .exceptions import DependencyCycleError
from .exceptions import TypeNotFoundError
from .manifest import parse_file
from .manifest import references
from .resolver import ResolvedType
from .resolver import Source
from .resolver import resolve_type

logger = logging.getLogger(__name__)


@dataclass
class DependencyNode:
    """Node in a per-invocation dependency tree."""

    resolved: ResolvedType
    children: list["DependencyNode"] = field(default_factory=list)

    @property
    def type_path(self) -> str:
        return self.resolved.type_path

    @property
    def category(self) -> str:
        return self.resolved.category

    @property
    def installed(self) -> bool:
        return self.resolved.installed

    def walk(self):
        """Yield this node and every descendant, depth-first pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()


def _resolve(type_path: str, sources: list[Source], installed_root: Path | None, parent: str | None) -> ResolvedType:
    resolved = resolve_type(type_path, sources)
    if resolved is None:
        context = {"sources": [s.name for s in sources]}
        if parent:
            context["referenced_by"] = parent
        raise TypeNotFoundError(type_path, context=context)

    if installed_root is not None and (installed_root / type_path).exists():
        resolved = resolved.model_copy(update={"installed": True})
    return resolved


def _build(
    type_path: str,
    sources: list[Source],
    installed_root: Path | None,
    stack: list[str],
) -> DependencyNode:
    if type_path in stack:
        cycle = stack[stack.index(type_path) :] + [type_path]
        raise DependencyCycleError(cycle)

    parent = stack[-1] if stack else None
    node = DependencyNode(resolved=_resolve(type_path, sources, installed_root, parent))

    stack.append(type_path)
    try:
        manifest = parse_file(node.resolved.manifest_path)
        for ref in references(manifest):
            node.children.append(_build(ref, sources, installed_root, stack))
    finally:
        stack.pop()

    return node


def build_tree(
    type_path: str,
    sources: list[Source],
    installed_root: Path | None = None,
    no_deps: bool = False,
) -> DependencyNode:
    """
    Resolve a type and, unless no_deps, all of its references recursively.

    Args:
        type_path: Root type, e.g. "prompts/code-review"
        sources: Sources in priority order
        installed_root: Types already present here are marked installed
        no_deps: Resolve only the root, build no children

    Returns:
        Root DependencyNode

    Raises:
        TypeNotFoundError: If the root or any reference, at any depth, is unresolvable
        DependencyCycleError: If a reference re-enters the current resolution path
        ManifestParseError, ManifestValidationError: If a manifest on the path is invalid

    Example:
        >>> tree = build_tree("prompts/code-review", sources, installed_root=Path("~/.agentx/installed"))
        >>> [child.type_path for child in tree.children]
        ['personas/reviewer', 'context/style-guide', 'skills/scm/git/commit-analyzer']
    """
    if no_deps:
        node = DependencyNode(resolved=_resolve(type_path, sources, installed_root, None))
        parse_file(node.resolved.manifest_path)
        return node

    root = _build(type_path, sources, installed_root, [])
    logger.debug(f"Built dependency tree for '{type_path}' with {sum(1 for _ in root.walk())} nodes")
    return root
