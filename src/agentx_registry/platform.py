"""Platform helpers - symlinks with a copy fallback, permission bits.

On POSIX everything maps directly to os calls. Where native symlinks are not
available (Windows without developer mode) links degrade to a file copy plus a
``.target`` sidecar recording the original target.
"""

import logging
import os
import shutil
import tempfile
from pathlib import Path

from .protocols import LinkPlatform

logger = logging.getLogger(__name__)

SECURE_FILE_MODE = 0o600
SECURE_DIR_MODE = 0o700
NORMAL_DIR_MODE = 0o755

SIDECAR_SUFFIX = ".target"


def is_windows() -> bool:
    return os.name == "nt"


def set_permissions(path: Path, mode: int) -> None:
    """chmod, except on Windows where permission bits are not supported."""
    if is_windows():
        return
    os.chmod(path, mode)


def _sidecar(link: Path) -> Path:
    return link.with_name(link.name + SIDECAR_SUFFIX)


class SymlinkPlatform:
    """LinkPlatform backed by os.symlink with a copy + sidecar fallback."""

    def create_link(self, target: Path, link: Path) -> None:
        try:
            os.symlink(target, link, target_is_directory=Path(target).is_dir())
            return
        except OSError:
            if not is_windows():
                raise

        # Relative targets are relative to the link's directory, as with symlinks
        source = target if target.is_absolute() else link.parent / target
        if source.is_dir():
            shutil.copytree(source, link)
        else:
            shutil.copy2(source, link)
        _sidecar(link).write_text(str(target), encoding="utf-8")
        logger.debug(f"Symlinks unavailable, copied {source} to {link}")

    def read_link_target(self, link: Path) -> Path:
        try:
            return Path(os.readlink(link))
        except OSError:
            sidecar = _sidecar(link)
            if not sidecar.is_file():
                raise
            return Path(sidecar.read_text(encoding="utf-8").strip())

    def remove_link(self, link: Path) -> None:
        """Remove a link (or its fallback copy) and any sidecar."""
        if link.is_dir() and not link.is_symlink():
            shutil.rmtree(link)
        else:
            link.unlink()
        _sidecar(link).unlink(missing_ok=True)

    def is_supported(self) -> bool:
        if not is_windows():
            return True
        with tempfile.TemporaryDirectory() as tmpdir:
            try:
                os.symlink(tmpdir, Path(tmpdir) / "probe", target_is_directory=True)
            except OSError:
                return False
        return True


def default_link_platform() -> LinkPlatform:
    return SymlinkPlatform()
