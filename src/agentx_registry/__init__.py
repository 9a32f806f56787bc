"""agentx-registry - Type registry and installation planning for agent configuration artifacts.

Resolves context docs, personas, skills, workflows, prompts and templates across
prioritized sources, builds their dependency trees, plans installs and
materializes them alongside per-skill userdata registries.

Per KERNEL_PHILOSOPHY: This is library mechanism, apps inject policy (sources, roots).
"""

from .cache import DiscoveryCache
from .cache import discover_all_cached
from .config import Extension
from .config import ProjectConfig
from .deptree import DependencyNode
from .deptree import build_tree
from .discovery import InstalledType
from .discovery import list_installed_types
from .exceptions import CLIMissingError
from .exceptions import ConfigError
from .exceptions import DependencyCycleError
from .exceptions import ManifestParseError
from .exceptions import ManifestValidationError
from .exceptions import RegistryError
from .exceptions import RegistryIOError
from .exceptions import TypeNotFoundError
from .exceptions import TypeNotInstalledError
from .installer import InstallResult
from .installer import install_plan
from .installer import install_type
from .installer import remove_type
from .manifest import ValidationIssue
from .manifest import ValidationResult
from .manifest import parse
from .manifest import parse_file
from .manifest import references
from .manifest import validate
from .manifest import validate_file
from .planner import CLIDependencyStatus
from .planner import InstallPlan
from .planner import build_install_plan
from .planner import flatten
from .platform import SymlinkPlatform
from .protocols import LinkPlatform
from .registry import RegistryStatus
from .registry import check_installed_registries
from .registry import check_skill_registry
from .registry import init_skill_registry
from .registry import skill_registry_path
from .resolver import ResolvedType
from .resolver import Source
from .resolver import build_sources
from .resolver import discover_all
from .resolver import discover_by_category
from .resolver import resolve_type
from .schema import CATEGORIES
from .schema import ContextManifest
from .schema import Manifest
from .schema import PersonaManifest
from .schema import PromptManifest
from .schema import SkillManifest
from .schema import TemplateManifest
from .schema import WorkflowManifest

__all__ = [
    # Manifests
    "CATEGORIES",
    "Manifest",
    "ContextManifest",
    "PersonaManifest",
    "SkillManifest",
    "WorkflowManifest",
    "PromptManifest",
    "TemplateManifest",
    "parse",
    "parse_file",
    "validate",
    "validate_file",
    "references",
    "ValidationIssue",
    "ValidationResult",
    # Sources & resolution
    "Source",
    "ResolvedType",
    "build_sources",
    "resolve_type",
    "discover_all",
    "discover_by_category",
    "DiscoveryCache",
    "discover_all_cached",
    "ProjectConfig",
    "Extension",
    # Planning
    "DependencyNode",
    "build_tree",
    "flatten",
    "InstallPlan",
    "CLIDependencyStatus",
    "build_install_plan",
    # Installation
    "install_type",
    "remove_type",
    "install_plan",
    "InstallResult",
    "InstalledType",
    "list_installed_types",
    # Skill registry
    "init_skill_registry",
    "check_skill_registry",
    "check_installed_registries",
    "skill_registry_path",
    "RegistryStatus",
    # Platform
    "LinkPlatform",
    "SymlinkPlatform",
    # Exceptions
    "RegistryError",
    "ConfigError",
    "ManifestParseError",
    "ManifestValidationError",
    "TypeNotFoundError",
    "TypeNotInstalledError",
    "DependencyCycleError",
    "RegistryIOError",
    "CLIMissingError",
]

__version__ = "0.1.0"
