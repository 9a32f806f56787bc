"""Tests for type installation."""

import os
import shutil
import tempfile
from pathlib import Path

import pytest
from conftest import skill_yaml
from conftest import write_type

from agentx_registry import Source
from agentx_registry import TypeNotInstalledError
from agentx_registry import build_install_plan
from agentx_registry import install_plan
from agentx_registry import install_type
from agentx_registry import remove_type
from agentx_registry import resolve_type

BASIC_SKILL = skill_yaml(
    "basic-skill",
    extra="""registry:
  tokens:
    - name: API_KEY
      required: true
      description: Service API key
  config:
    region: us-east-1
""",
)


def test_install_copies_source_tree():
    """Installed copy mirrors the source, minus excluded entries."""
    with tempfile.TemporaryDirectory() as tmpdir:
        base = Path(tmpdir)
        catalog = base / "catalog"
        write_type(catalog, "skills/test/basic-skill", BASIC_SKILL, "skill.yaml")
        skill_dir = catalog / "skills" / "test" / "basic-skill"
        (skill_dir / "src").mkdir()
        (skill_dir / "src" / "index.js").write_text("console.log('hi')")
        (skill_dir / "node_modules" / "dep").mkdir(parents=True)
        (skill_dir / ".git").mkdir()
        (skill_dir / ".DS_Store").write_text("")
        os.symlink(skill_dir / "src" / "index.js", skill_dir / "link.js")

        resolved = resolve_type("skills/test/basic-skill", [Source(name="catalog", base_path=catalog)])
        destination = install_type(resolved, base / "installed")

        assert destination == base / "installed" / "skills" / "test" / "basic-skill"
        assert (destination / "skill.yaml").read_text() == BASIC_SKILL
        assert (destination / "src" / "index.js").exists()
        assert not (destination / "node_modules").exists()
        assert not (destination / ".git").exists()
        assert not (destination / ".DS_Store").exists()
        assert not (destination / "link.js").exists()


def test_reinstall_is_clean_replace():
    """Files added to an installed copy disappear on reinstall."""
    with tempfile.TemporaryDirectory() as tmpdir:
        base = Path(tmpdir)
        write_type(base / "catalog", "skills/a", skill_yaml("a"))
        resolved = resolve_type("skills/a", [Source(name="catalog", base_path=base / "catalog")])

        destination = install_type(resolved, base / "installed")
        (destination / "stray.txt").write_text("out of band")

        install_type(resolved, base / "installed")

        assert not (destination / "stray.txt").exists()
        assert (destination / "manifest.yaml").exists()


def test_remove_type():
    """Uninstall deletes the installed copy only."""
    with tempfile.TemporaryDirectory() as tmpdir:
        base = Path(tmpdir)
        write_type(base / "catalog", "skills/a", skill_yaml("a"))
        resolved = resolve_type("skills/a", [Source(name="catalog", base_path=base / "catalog")])
        install_type(resolved, base / "installed")

        remove_type("skills/a", base / "installed")

        assert not (base / "installed" / "skills" / "a").exists()
        assert (base / "catalog" / "skills" / "a" / "manifest.yaml").exists()


def test_remove_not_installed():
    with tempfile.TemporaryDirectory() as tmpdir:
        with pytest.raises(TypeNotInstalledError):
            remove_type("skills/missing", Path(tmpdir))


def test_install_plan_initializes_skill_registry(monkeypatch):
    """Installing a skill with a required token scaffolds its registry and warns."""
    monkeypatch.setattr(shutil, "which", lambda name, *args, **kwargs: None)
    with tempfile.TemporaryDirectory() as tmpdir:
        base = Path(tmpdir)
        write_type(
            base / "catalog",
            "skills/test/basic-skill",
            BASIC_SKILL + "cli_dependencies:\n  - name: jq\n",
            "skill.yaml",
        )
        sources = [Source(name="catalog", base_path=base / "catalog")]
        plan = build_install_plan("skills/test/basic-skill", sources, base / "installed")

        result = install_plan(plan, base / "installed", base / "userdata")

        assert result.installed == ["skills/test/basic-skill"]
        assert result.skipped == 0
        assert any("API_KEY" in w for w in result.warnings)
        assert "Missing CLI: jq" in result.warnings

        tokens = base / "userdata" / "skills" / "test" / "basic-skill" / "tokens.env"
        assert "API_KEY=" in tokens.read_text().splitlines()
        assert (base / "installed" / "skills" / "test" / "basic-skill" / "skill.yaml").exists()


def test_remove_rejects_paths_that_are_not_one_type():
    """Category dirs, empty paths and parent segments never delete anything."""
    with tempfile.TemporaryDirectory() as tmpdir:
        base = Path(tmpdir)
        write_type(base / "catalog", "skills/a", skill_yaml("a"))
        resolved = resolve_type("skills/a", [Source(name="catalog", base_path=base / "catalog")])
        installed = base / "installed"
        install_type(resolved, installed)

        for type_path in ["skills", "", "skills/../..", "skills/a/..", "widgets/a"]:
            with pytest.raises(TypeNotInstalledError):
                remove_type(type_path, installed)

        assert (installed / "skills" / "a" / "manifest.yaml").exists()


@pytest.mark.skipif(os.name == "nt", reason="native symlinks")
def test_remove_refuses_symlink_outside_root():
    """A linked type pointing outside the installed root is left alone."""
    with tempfile.TemporaryDirectory() as tmpdir:
        base = Path(tmpdir)
        outside = base / "outside"
        outside.mkdir()
        (outside / "keep.txt").write_text("keep")
        installed = base / "installed"
        (installed / "skills").mkdir(parents=True)
        os.symlink(outside, installed / "skills" / "linked", target_is_directory=True)

        with pytest.raises(TypeNotInstalledError):
            remove_type("skills/linked", installed)

        assert (outside / "keep.txt").exists()
