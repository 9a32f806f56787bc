"""Tests for manifest schema models."""

import re

import pytest
from pydantic import ValidationError

from agentx_registry import ContextManifest
from agentx_registry import SkillManifest
from agentx_registry import WorkflowManifest
from agentx_registry.schema import CATEGORY_DIRS
from agentx_registry.schema import MANIFEST_ADAPTER
from agentx_registry.schema import reference_pattern


def test_discriminator_selects_variant():
    """The type field picks the manifest model."""
    manifest = MANIFEST_ADAPTER.validate_python(
        {
            "name": "style-guide",
            "version": "1.0.0",
            "description": "House style",
            "type": "context",
            "format": "markdown",
            "sources": ["style.md"],
        }
    )

    assert isinstance(manifest, ContextManifest)
    assert manifest.category == "context"
    assert manifest.tokens is None


def test_skill_registry_block():
    """Skill registry block parses tokens and config defaults."""
    manifest = MANIFEST_ADAPTER.validate_python(
        {
            "name": "basic-skill",
            "version": "1.0.0",
            "description": "Basic",
            "type": "skill",
            "runtime": "go",
            "topic": "test",
            "vendor": "acme",
            "cli_dependencies": [{"name": "git", "min_version": "2.40"}],
            "outputs": {"format": "json", "schema": "schemas/output.json"},
            "registry": {
                "tokens": [{"name": "API_KEY", "required": True}],
                "config": {"region": "us-east-1", "retries": 3},
            },
        }
    )

    assert isinstance(manifest, SkillManifest)
    assert manifest.vendor == "acme"
    assert manifest.cli_dependencies[0].name == "git"
    assert manifest.outputs.schema_ == "schemas/output.json"
    assert manifest.registry.tokens[0].default == ""
    assert manifest.registry.config == {"region": "us-east-1", "retries": 3}
    assert manifest.registry.templates is None


def test_version_pattern():
    """Two or three numeric components, optional v prefix and pre-release."""
    base = {"name": "x", "description": "d", "type": "template", "format": "markdown"}

    for version in ["1.0", "1.0.0", "v2.1.3", "1.0.0-beta.1"]:
        MANIFEST_ADAPTER.validate_python({**base, "version": version})

    for version in ["1", "latest", "1.0.0.0"]:
        with pytest.raises(ValidationError):
            MANIFEST_ADAPTER.validate_python({**base, "version": version})


def test_name_pattern_rejects_uppercase():
    """Names are lowercase kebab-case."""
    with pytest.raises(ValidationError):
        MANIFEST_ADAPTER.validate_python(
            {"name": "Bad_Name", "version": "1.0.0", "description": "d", "type": "template", "format": "md"}
        )


def test_workflow_requires_steps():
    """A workflow without steps is invalid."""
    with pytest.raises(ValidationError):
        WorkflowManifest.model_validate(
            {"name": "w", "version": "1.0.0", "description": "d", "type": "workflow", "runtime": "node", "steps": []}
        )


def test_reference_patterns():
    """Cross-references must point into the matching category directory."""
    skills = re.compile(reference_pattern("skills"))
    assert skills.match("skills/scm/git/commit-analyzer")
    assert skills.match("skills/basic")
    assert not skills.match("personas/reviewer")
    assert not skills.match("skills/")
    assert not skills.match("skills/Upper")


def test_manifests_are_frozen():
    """Parsed manifests are immutable."""
    manifest = MANIFEST_ADAPTER.validate_python(
        {"name": "t", "version": "1.0.0", "description": "d", "type": "template", "format": "md"}
    )

    with pytest.raises(ValidationError):
        manifest.name = "other"


def test_category_dirs_cover_all_types():
    """Every category has a plural directory."""
    assert set(CATEGORY_DIRS) == {"context", "persona", "skill", "workflow", "prompt", "template"}
    assert CATEGORY_DIRS["persona"] == "personas"
    assert CATEGORY_DIRS["context"] == "context"
