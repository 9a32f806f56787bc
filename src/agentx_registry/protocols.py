"""Protocols for platform-specific filesystem behavior.

Per KERNEL_PHILOSOPHY: Protocol-based extensibility over configuration.
Per IMPLEMENTATION_PHILOSOPHY: Composition over inheritance.

The engine never branches on operating system; anything that differs between
platforms (symlinks, permission bits) sits behind these interfaces.
"""

from pathlib import Path
from typing import Protocol
from typing import runtime_checkable


@runtime_checkable
class LinkPlatform(Protocol):
    """Protocol for creating and reading links to installed types.

    Used by the linking collaborator that exposes installed types inside a
    project. Apps can provide any implementation (symlinks, copies, junctions).
    """

    def create_link(self, target: Path, link: Path) -> None:
        """Make link point at target.

        Raises:
            OSError: If the link cannot be created
        """
        ...

    def read_link_target(self, link: Path) -> Path:
        """Return the path link points at.

        Raises:
            OSError: If link is not a link created by this platform
        """
        ...

    def is_supported(self) -> bool:
        """Whether native links work on this machine."""
        ...
