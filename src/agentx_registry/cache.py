"""Discovery cache - JSON index of discovered types.

Walking every source is cheap for a handful of types but adds up for large
catalogs, so listing/search callers can go through a cached index. The cache is
keyed on each source's latest mtime (source root, category dirs and one level
below), which changes whenever a type directory is added or removed.

Per KERNEL_PHILOSOPHY: Cache location is policy - apps inject the path.

Per IMPLEMENTATION_PHILOSOPHY:
- Ruthless simplicity: Simple JSON file, no complex format
- Best effort: a broken or unwritable cache never fails discovery
"""

import json
import logging
from datetime import UTC
from datetime import datetime
from pathlib import Path

from pydantic import ValidationError

from .resolver import ResolvedType
from .resolver import Source
from .resolver import discover_all
from .schema import CATEGORY_DIRS

logger = logging.getLogger(__name__)


def latest_mtime(base_path: Path) -> int:
    """
    Latest mtime (ns) across a source root, its category dirs and one level below.

    Returns:
        0 if the source does not exist
    """
    try:
        latest = base_path.stat().st_mtime_ns
    except OSError:
        return 0

    for plural in CATEGORY_DIRS.values():
        category_dir = base_path / plural
        if not category_dir.is_dir():
            continue
        latest = max(latest, category_dir.stat().st_mtime_ns)
        for entry in category_dir.iterdir():
            if entry.is_dir():
                latest = max(latest, entry.stat().st_mtime_ns)

    return latest


def _fingerprint(sources: list[Source]) -> dict[str, dict]:
    return {s.name: {"path": str(s.base_path), "mtime": latest_mtime(s.base_path)} for s in sources}


class DiscoveryCache:
    """
    Discovery index manager (with injected cache path).

    Cache format (JSON):
    {
      "version": "1.0",
      "cached_at": "2026-10-19T12:00:00+00:00",
      "sources": {"catalog": {"path": "/repo/catalog", "mtime": 1760875200000000000}},
      "types": [{"type_path": "skills/scm/git/commit-analyzer", ...}]
    }
    """

    VERSION = "1.0"

    def __init__(self, cache_path: Path):
        """Initialize cache manager with app-provided path.

        Args:
            cache_path: Path to cache file (app determines location)

        Example:
            >>> cache = DiscoveryCache(cache_path=Path.home() / ".agentx" / "registry-cache.json")
        """
        self.cache_path = cache_path
        self._sources: dict[str, dict] = {}
        self._types: list[ResolvedType] = []
        self._load()

    def _load(self) -> None:
        """Load cache file if it exists."""
        if not self.cache_path.exists():
            return

        try:
            with open(self.cache_path) as f:
                data = json.load(f)

            if data.get("version") != self.VERSION:
                logger.warning(f"Cache version mismatch: expected {self.VERSION}, got {data.get('version')}")
                return

            self._sources = data.get("sources", {})
            self._types = [ResolvedType.model_validate(entry) for entry in data.get("types", [])]
            logger.debug(f"Loaded {len(self._types)} types from cache")

        except (OSError, ValueError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable cache {self.cache_path}: {e}")
            self._sources = {}
            self._types = []

    def is_valid(self, sources: list[Source]) -> bool:
        """True if the cache was built from exactly these sources and none changed since."""
        if not self._sources:
            return False
        return self._sources == _fingerprint(sources)

    @property
    def types(self) -> list[ResolvedType]:
        return list(self._types)

    def save(self, types: list[ResolvedType], sources: list[Source]) -> None:
        """Write the index (best effort; failures are logged, not raised)."""
        self._sources = _fingerprint(sources)
        self._types = list(types)

        data = {
            "version": self.VERSION,
            "cached_at": datetime.now(UTC).isoformat(),
            "sources": self._sources,
            "types": [t.model_dump(mode="json") for t in self._types],
        }

        try:
            self.cache_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.cache_path, "w") as f:
                json.dump(data, f, indent=2)
            logger.debug(f"Saved cache with {len(self._types)} types")
        except OSError as e:
            logger.error(f"Failed to save cache: {e}")


def discover_all_cached(sources: list[Source], cache_path: Path) -> list[ResolvedType]:
    """
    discover_all() through a cache file.

    Args:
        sources: Sources in priority order
        cache_path: Cache file location (app policy)

    Returns:
        Same result as discover_all(sources)
    """
    cache = DiscoveryCache(cache_path)
    if cache.is_valid(sources):
        logger.debug("Discovery cache hit")
        return cache.types

    types = discover_all(sources)
    cache.save(types, sources)
    return types
