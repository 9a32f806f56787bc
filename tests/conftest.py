"""Shared helpers for building source trees on disk."""

from pathlib import Path


def write_type(base: Path, type_path: str, body: str, filename: str = "manifest.yaml") -> Path:
    """Create <base>/<type_path>/<filename> with body and return the manifest path."""
    type_dir = base / type_path
    type_dir.mkdir(parents=True, exist_ok=True)
    manifest = type_dir / filename
    manifest.write_text(body)
    return manifest


def skill_yaml(name: str, version: str = "1.0.0", extra: str = "") -> str:
    return f"name: {name}\nversion: {version}\ndescription: Skill {name}\ntype: skill\nruntime: node\ntopic: test\n{extra}"


def persona_yaml(name: str, version: str = "1.0.0", extra: str = "") -> str:
    return f"name: {name}\nversion: {version}\ndescription: Persona {name}\ntype: persona\n{extra}"


def context_yaml(name: str, version: str = "1.0.0") -> str:
    return f"name: {name}\nversion: {version}\ndescription: Context {name}\ntype: context\nformat: markdown\nsources:\n  - {name}.md\n"
