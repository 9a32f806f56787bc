"""Manifest parsing and validation.

Parse: bytes -> typed manifest (raises). Validate: document -> structured issue
list (never raises on schema problems). Both go through the same pydantic
adapter from schema.py, so "valid" means the same thing in both flows.

Per IMPLEMENTATION_PHILOSOPHY: Clear, actionable error messages - issues are
reported as JSON pointers with a JSON-Schema style keyword.
"""

import logging
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .exceptions import ManifestParseError
from .exceptions import ManifestValidationError
from .exceptions import RegistryIOError
from .schema import CATEGORIES
from .schema import MANIFEST_ADAPTER
from .schema import Manifest
from .schema import PersonaManifest
from .schema import PromptManifest
from .schema import WorkflowManifest

logger = logging.getLogger(__name__)

# pydantic error type -> JSON-Schema keyword
_KEYWORDS = {
    "missing": "required",
    "union_tag_not_found": "required",
    "union_tag_invalid": "enum",
    "literal_error": "enum",
    "string_pattern_mismatch": "pattern",
    "too_short": "minItems",
    "too_long": "maxItems",
    "string_too_short": "minLength",
    "string_too_long": "maxLength",
    "extra_forbidden": "additionalProperties",
    "string_type": "type",
    "int_type": "type",
    "int_parsing": "type",
    "int_from_float": "type",
    "bool_type": "type",
    "bool_parsing": "type",
    "list_type": "type",
    "dict_type": "type",
    "model_type": "type",
    "model_attributes_type": "type",
}

# Errors about the discriminator itself carry an empty location.
_TAG_ERRORS = {"union_tag_not_found", "union_tag_invalid"}


@dataclass(frozen=True)
class ValidationIssue:
    """Single schema violation."""

    path: str  # JSON pointer, e.g. "/steps/0/skill"; "" for the document root
    message: str
    keyword: str

    def __str__(self) -> str:
        location = self.path or "/"
        return f"{location}: {self.message} ({self.keyword})"


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    issues: list[ValidationIssue] = field(default_factory=list)


def _load_document(data: bytes | str, origin: str = "<manifest>") -> Any:
    try:
        return yaml.safe_load(data)
    except yaml.YAMLError as e:
        raise ManifestParseError(f"Invalid YAML in {origin}: {e}", context={"origin": origin}) from e


def _pointer(loc: tuple, document: Any) -> str:
    parts = list(loc)
    # Tagged-union errors are prefixed with the tag of the branch that ran.
    if parts and isinstance(document, dict) and parts[0] == document.get("type") and parts[0] in CATEGORIES:
        parts = parts[1:]
    # Drop branch labels such as "function-after[...]" or "literal['node','go']".
    parts = [str(p) for p in parts if not (isinstance(p, str) and "[" in p)]
    if not parts:
        return ""
    return "/" + "/".join(parts)


def _issues_from_error(error: ValidationError, document: Any) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    seen: set[tuple[str, str, str]] = set()

    for detail in error.errors(include_url=False):
        error_type = detail["type"]
        keyword = _KEYWORDS.get(error_type, error_type)
        path = "/type" if error_type in _TAG_ERRORS else _pointer(detail["loc"], document)
        message = detail["msg"]

        key = (path, keyword, message)
        if key in seen:
            continue
        seen.add(key)
        issues.append(ValidationIssue(path=path, message=message, keyword=keyword))

    return issues


def _check(document: Any) -> tuple[Manifest | None, list[ValidationIssue]]:
    if not isinstance(document, dict):
        return None, [ValidationIssue(path="", message="Manifest must be a mapping", keyword="type")]
    try:
        return MANIFEST_ADAPTER.validate_python(document), []
    except ValidationError as e:
        return None, _issues_from_error(e, document)


def validate(document: bytes | str | dict) -> ValidationResult:
    """
    Validate a manifest document against the schema.

    Unknown or missing ``type`` is reported as an issue, not raised.

    Args:
        document: Raw YAML/JSON bytes or text, or an already-loaded mapping

    Returns:
        ValidationResult with every leaf-level issue (deduplicated)

    Raises:
        ManifestParseError: If raw input is not well-formed YAML/JSON

    Example:
        >>> result = validate(b"name: x\\ntype: unknown-type\\n")
        >>> result.valid
        False
        >>> result.issues[0].keyword
        'enum'
    """
    if isinstance(document, bytes | str):
        document = _load_document(document)
    _, issues = _check(document)
    return ValidationResult(valid=not issues, issues=issues)


def parse(data: bytes | str, origin: str = "<manifest>") -> Manifest:
    """
    Parse raw manifest bytes into a typed manifest.

    Args:
        data: Raw YAML (or JSON) manifest content
        origin: Label used in error messages (usually the file path)

    Returns:
        One of ContextManifest, PersonaManifest, SkillManifest, WorkflowManifest,
        PromptManifest or TemplateManifest

    Raises:
        ManifestParseError: If content is not well-formed or not a mapping
        ManifestValidationError: If content does not satisfy the schema
    """
    document = _load_document(data, origin)
    if not isinstance(document, dict):
        raise ManifestParseError(f"Manifest {origin} must be a mapping", context={"origin": origin})

    manifest, issues = _check(document)
    if issues:
        summary = "; ".join(str(issue) for issue in issues[:3])
        if len(issues) > 3:
            summary += f" (+{len(issues) - 3} more)"
        raise ManifestValidationError(
            f"Invalid manifest {origin}: {summary}",
            issues=issues,
            context={"origin": origin},
        )
    return manifest


def _read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise RegistryIOError("read", path, e) from e


def parse_file(path: Path) -> Manifest:
    """Parse a manifest file. Unreadable files raise RegistryIOError."""
    return parse(_read_bytes(path), origin=str(path))


def validate_file(path: Path) -> ValidationResult:
    """Validate a manifest file. Unreadable files raise RegistryIOError."""
    return validate(_read_bytes(path))


def read_metadata(path: Path) -> dict[str, Any]:
    """
    Read a manifest's raw mapping without schema validation.

    Used for listing and enrichment where a broken manifest should still show up.

    Raises:
        RegistryIOError: If file cannot be read
        ManifestParseError: If content is not a well-formed mapping
    """
    document = _load_document(_read_bytes(path), str(path))
    if not isinstance(document, dict):
        raise ManifestParseError(f"Manifest {path} must be a mapping", context={"origin": str(path)})
    return document


def references(manifest: Manifest) -> list[str]:
    """
    Type paths a manifest declares as dependencies, in declaration order.

    Mapping:
    - prompt: persona, context[], skills[], workflows[]
    - workflow: one skill per step (repeats kept)
    - persona: context[]
    - context, skill, template: none (skills are atomic)
    """
    if isinstance(manifest, PromptManifest):
        refs = [manifest.persona] if manifest.persona else []
        return refs + list(manifest.context) + list(manifest.skills) + list(manifest.workflows)
    if isinstance(manifest, WorkflowManifest):
        return [step.skill for step in manifest.steps]
    if isinstance(manifest, PersonaManifest):
        return list(manifest.context)
    return []
