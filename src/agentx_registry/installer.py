"""Type installation mechanism.

Per KERNEL_PHILOSOPHY: Mechanism not policy - apps decide WHERE (installed root,
userdata root) and WHAT (the plan); this module only materializes it.

Install is a clean replace: the existing copy is removed, then the source tree
is copied verbatim. Anything that crept into an installed copy out of band is
gone after a reinstall. This is remove-then-copy, not write-and-rename; a crash
mid-copy can leave a partial copy behind, and a multi-type install is never
rolled back - the first failure aborts.
"""

import logging
import shutil
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path

from .exceptions import RegistryIOError
from .exceptions import TypeNotInstalledError
from .planner import InstallPlan
from .registry import init_skill_registry
from .resolver import ResolvedType
from .utils import is_valid_type_path

logger = logging.getLogger(__name__)

# Never copied into an installed type.
EXCLUDED_NAMES = frozenset({"node_modules", ".git", ".DS_Store"})


@dataclass
class InstallResult:
    """Outcome of executing an install plan."""

    installed: list[str] = field(default_factory=list)
    skipped: int = 0
    warnings: list[str] = field(default_factory=list)


def _ignore(directory: str, names: list[str]) -> set[str]:
    # Symlinks and special files are skipped along with the excluded names
    ignored = set()
    for name in names:
        path = Path(directory) / name
        if name in EXCLUDED_NAMES or path.is_symlink() or not (path.is_file() or path.is_dir()):
            ignored.add(name)
    return ignored


def install_type(resolved: ResolvedType, installed_root: Path) -> Path:
    """
    Install (or reinstall) a single type.

    Process:
    1. Remove installed_root/<type_path> if it exists
    2. Copy the source directory verbatim (minus node_modules/, .git/, .DS_Store)

    Args:
        resolved: Type to install
        installed_root: Installed root (app policy)

    Returns:
        Path of the installed copy

    Raises:
        RegistryIOError: If removal or copy fails

    Example:
        >>> dest = install_type(resolved, Path("~/.agentx/installed").expanduser())
        >>> dest.name
        'commit-analyzer'
    """
    destination = installed_root / resolved.type_path

    if destination.exists() or destination.is_symlink():
        logger.debug(f"Removing existing installation at {destination}")
        try:
            if destination.is_dir() and not destination.is_symlink():
                shutil.rmtree(destination)
            else:
                destination.unlink()
        except OSError as e:
            raise RegistryIOError("remove", destination, e) from e

    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copytree(resolved.source_dir, destination, ignore=_ignore)
    except (OSError, shutil.Error) as e:
        raise RegistryIOError("copy", resolved.source_dir, e) from e

    logger.info(f"Installed {resolved.type_path} from {resolved.source_name}")
    return destination


def remove_type(type_path: str, installed_root: Path) -> None:
    """
    Uninstall a type: delete its installed copy only.

    Skill registries under the userdata root are left untouched.

    Raises:
        TypeNotInstalledError: If type_path does not name a single type, or no
            installed copy exists
        RegistryIOError: If removal fails
    """
    context = {"installed_root": str(installed_root)}
    if not is_valid_type_path(type_path):
        # Bare category dirs, empty paths and ".." segments never name one type
        raise TypeNotInstalledError(type_path, context={**context, "reason": "invalid type path"})

    target = installed_root / type_path
    root = installed_root.resolve()
    resolved_target = target.resolve()
    if resolved_target == root or not resolved_target.is_relative_to(root):
        raise TypeNotInstalledError(type_path, context={**context, "reason": "outside installed root"})

    if not target.is_dir():
        raise TypeNotInstalledError(type_path, context=context)

    try:
        logger.info(f"Uninstalling {type_path}")
        shutil.rmtree(target)
    except OSError as e:
        raise RegistryIOError("remove", target, e) from e


def install_plan(plan: InstallPlan, installed_root: Path, userdata_root: Path) -> InstallResult:
    """
    Execute an install plan in order.

    Every planned type is installed (dependencies first); skills additionally
    get their userdata registry initialized. Registry warnings (unset required
    tokens) are collected, not raised.

    Args:
        plan: Plan from build_install_plan (usually confirmed by the user)
        installed_root: Installed root (app policy)
        userdata_root: Userdata root (app policy)

    Returns:
        InstallResult with installed type paths, skip count and warnings

    Raises:
        RegistryIOError, ManifestParseError, ManifestValidationError: First
            failure aborts; already-installed types from this plan remain
    """
    result = InstallResult(skipped=plan.skip_count)

    for resolved in plan.all_types:
        destination = install_type(resolved, installed_root)
        result.installed.append(resolved.type_path)

        if resolved.category == "skill":
            # Registry is initialized from the installed copy of the manifest
            installed = resolved.model_copy(
                update={"manifest_path": destination / resolved.manifest_path.name, "source_dir": destination}
            )
            result.warnings.extend(init_skill_registry(installed, userdata_root))

    for dep in plan.cli_deps:
        if not dep.available:
            result.warnings.append(f"Missing CLI: {dep.name}")

    logger.info(f"Installed {len(result.installed)} types ({result.skipped} already installed)")
    return result
