"""Default locations for the installed root, userdata root and discovery cache.

These read the environment and the home directory, so they belong at the app
edge: resolve once, then pass the paths into the engine explicitly. Nothing
below this module reads environment variables.
"""

import os
from pathlib import Path

HOME_DIR = ".agentx"
ENV_PREFIX = "AGENTX"

INSTALLED_DIR = "installed"
USERDATA_DIR = "userdata"
SKILLS_DIR = "skills"
CACHE_FILE = "registry-cache.json"


def env_var(suffix: str) -> str:
    """Environment variable name for a setting, e.g. env_var("USERDATA") -> "AGENTX_USERDATA"."""
    return f"{ENV_PREFIX}_{suffix}"


def get_home_root() -> Path:
    return Path.home() / HOME_DIR


def get_installed_root() -> Path:
    """$AGENTX_INSTALLED, falling back to ~/.agentx/installed."""
    value = os.environ.get(env_var("INSTALLED"))
    if value:
        return Path(value).expanduser()
    return get_home_root() / INSTALLED_DIR


def get_userdata_root() -> Path:
    """$AGENTX_USERDATA, falling back to ~/.agentx/userdata."""
    value = os.environ.get(env_var("USERDATA"))
    if value:
        return Path(value).expanduser()
    return get_home_root() / USERDATA_DIR


def get_cache_path() -> Path:
    return get_home_root() / CACHE_FILE
