"""Tests for default root locations."""

from pathlib import Path

from agentx_registry.paths import get_cache_path
from agentx_registry.paths import get_installed_root
from agentx_registry.paths import get_userdata_root


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("AGENTX_INSTALLED", str(tmp_path / "inst"))
    monkeypatch.setenv("AGENTX_USERDATA", str(tmp_path / "data"))

    assert get_installed_root() == tmp_path / "inst"
    assert get_userdata_root() == tmp_path / "data"


def test_home_defaults(monkeypatch, tmp_path):
    """Unset or empty variables fall back to ~/.agentx."""
    monkeypatch.delenv("AGENTX_INSTALLED", raising=False)
    monkeypatch.setenv("AGENTX_USERDATA", "")
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

    assert get_installed_root() == tmp_path / ".agentx" / "installed"
    assert get_userdata_root() == tmp_path / ".agentx" / "userdata"
    assert get_cache_path() == tmp_path / ".agentx" / "registry-cache.json"
