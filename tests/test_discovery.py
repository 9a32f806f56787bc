"""Tests for installed type discovery."""

import tempfile
from pathlib import Path

import pytest
from conftest import context_yaml
from conftest import skill_yaml
from conftest import write_type

from agentx_registry import list_installed_types
from agentx_registry.discovery import is_installed


def test_list_installed_types():
    """Both manifest naming conventions are recognized."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        write_type(root, "skills/scm/git/commit-analyzer", skill_yaml("commit-analyzer"), "skill.yaml")
        write_type(root, "skills/basic", '{"name": "basic", "type": "skill"}', "manifest.json")
        write_type(root, "context/style", context_yaml("style"))
        (root / "personas" / "empty").mkdir(parents=True)

        installed = list_installed_types(root)

        assert [t.type_path for t in installed] == [
            "context/style",
            "skills/basic",
            "skills/scm/git/commit-analyzer",
        ]
        assert installed[2].manifest_path.name == "skill.yaml"


def test_category_filter():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        write_type(root, "skills/basic", skill_yaml("basic"))
        write_type(root, "context/style", context_yaml("style"))

        skills = list_installed_types(root, category="skill")

        assert [t.category for t in skills] == ["skill"]

        with pytest.raises(ValueError):
            list_installed_types(root, category="skills")


def test_empty_root():
    with tempfile.TemporaryDirectory() as tmpdir:
        assert list_installed_types(Path(tmpdir) / "missing") == []


def test_is_installed():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        write_type(root, "skills/basic", skill_yaml("basic"))

        assert is_installed("skills/basic", root)
        assert not is_installed("skills/other", root)
