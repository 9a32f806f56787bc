"""Tests for platform link helpers."""

import os
import tempfile
from pathlib import Path

import pytest

import agentx_registry.platform as platform_module
from agentx_registry import LinkPlatform
from agentx_registry import SymlinkPlatform
from agentx_registry.platform import default_link_platform
from agentx_registry.platform import set_permissions


def test_symlink_platform_satisfies_protocol():
    assert isinstance(default_link_platform(), LinkPlatform)


@pytest.mark.skipif(os.name == "nt", reason="native symlinks")
def test_create_and_read_link():
    with tempfile.TemporaryDirectory() as tmpdir:
        base = Path(tmpdir)
        target = base / "installed" / "skills" / "a"
        target.mkdir(parents=True)
        link = base / "project" / "a"
        link.parent.mkdir()

        platform = SymlinkPlatform()
        platform.create_link(target, link)

        assert link.is_symlink()
        assert platform.read_link_target(link) == target
        assert platform.is_supported()

        platform.remove_link(link)
        assert not link.exists()
        assert target.exists()


def test_copy_fallback_when_symlinks_unavailable(monkeypatch):
    """Without symlinks the target is copied and recorded in a sidecar."""

    def no_symlink(*args, **kwargs):
        raise OSError("symlinks not permitted")

    monkeypatch.setattr(platform_module, "is_windows", lambda: True)
    monkeypatch.setattr(os, "symlink", no_symlink)

    with tempfile.TemporaryDirectory() as tmpdir:
        base = Path(tmpdir)
        target = base / "installed" / "a"
        target.mkdir(parents=True)
        (target / "manifest.yaml").write_text("name: a")
        link = base / "a"

        platform = SymlinkPlatform()
        platform.create_link(target, link)

        assert (link / "manifest.yaml").read_text() == "name: a"
        assert platform.read_link_target(link) == target
        assert not platform.is_supported()

        platform.remove_link(link)
        assert not link.exists()
        assert not (base / "a.target").exists()


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_set_permissions():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "secret"
        path.write_text("x")

        set_permissions(path, 0o600)

        assert path.stat().st_mode & 0o777 == 0o600
