"""
Caching for weather observations.

Observations are keyed by the raw location token and kept for a fixed TTL.
Two layers:
- an in-process TTLCache so repeat lookups skip the disk entirely
- a directory-backed store (one JSON file per key) shared by concurrent
  invocations; files are replaced atomically, so readers never see a
  partial entry and same-key writers are last-write-wins

Expired files are ignored on read and swept on write at most once per
purge interval.
"""

import hashlib
import json
import os
import tempfile
import threading
import time
from pathlib import Path
from typing import Callable, Iterable, Optional

from cachetools import TTLCache

from common import logger as debug_logger
from common.paths import get_cache_paths
from saytime_weather.config.constants import CACHE_PURGE_INTERVAL, DEFAULT_CACHE_DURATION, MEMORY_CACHE_SIZE
from saytime_weather.core.errors import CacheUnavailable
from saytime_weather.core.models import CacheEntry, WeatherObservation

PURGE_MARKER = ".last_purge"


class DirectoryStore:
    """Directory-backed key/value store of CacheEntry records."""

    def __init__(
        self,
        root: Path,
        purge_interval: float = CACHE_PURGE_INTERVAL,
        timer: Callable[[], float] = time.time,
    ):
        """
        Open (and create if needed) a cache directory.

        Raises:
            CacheUnavailable: If the directory cannot be created or written
        """
        self.root = Path(root)
        self.purge_interval = purge_interval
        self._timer = timer
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheUnavailable(f"Failed to create cache directory: {self.root} - {e}") from e
        if not os.access(self.root, os.W_OK):
            raise CacheUnavailable(f"Cache directory not writable: {self.root}")

    def _path(self, key: str) -> Path:
        digest = hashlib.sha1(key.encode('utf-8')).hexdigest()
        return self.root / f"{digest}.json"

    def _read(self, path: Path) -> Optional[CacheEntry]:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return CacheEntry.from_dict(json.load(f))
        except FileNotFoundError:
            return None
        except (OSError, ValueError, KeyError, TypeError) as e:
            debug_logger.debug(f"Ignoring unreadable cache file {path.name}: {e}")
            return None

    def get(self, key: str) -> Optional[CacheEntry]:
        """Return the stored entry for key if present and still fresh."""
        entry = self._read(self._path(key))
        if entry is None or entry.key != key:
            return None
        if entry.is_expired(self._timer()):
            return None
        return entry

    def set(self, entry: CacheEntry) -> None:
        """
        Store an entry, replacing any previous value for the key.

        Raises:
            OSError: If the entry cannot be written
        """
        fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=".tmp-", suffix=".tmp")
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(entry.to_dict(), f)
            os.replace(tmp_name, self._path(entry.key))
        except BaseException:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise
        self.maybe_purge()

    def purge(self) -> int:
        """
        Delete expired and unreadable entries.

        Returns:
            Number of files removed
        """
        now = self._timer()
        removed = 0
        for path in self.root.glob('*.json'):
            if path.name.startswith('.'):
                continue  # In-flight write from another process
            entry = self._read(path)
            if entry is not None and not entry.is_expired(now):
                continue
            try:
                path.unlink()
                removed += 1
            except OSError:
                pass  # Another process may have replaced or removed it
        debug_logger.debug(f"Cache purge removed {removed} entries from {self.root}")
        return removed

    def maybe_purge(self) -> None:
        """Run purge() if the last sweep is older than the purge interval."""
        marker = self.root / PURGE_MARKER
        now = self._timer()
        try:
            last = float(marker.read_text(encoding='utf-8').strip())
        except (OSError, ValueError):
            last = 0.0
        if now - last < self.purge_interval:
            return
        try:
            marker.write_text(str(now), encoding='utf-8')
        except OSError as e:
            debug_logger.debug(f"Cannot update purge marker: {e}")
        self.purge()


class WeatherCache:
    """
    TTL cache of WeatherObservation keyed by raw location token.

    With ``bypass`` set, get() always misses and set() does nothing.
    """

    def __init__(
        self,
        store: Optional[DirectoryStore] = None,
        ttl: float = DEFAULT_CACHE_DURATION,
        bypass: bool = False,
        timer: Callable[[], float] = time.time,
        maxsize: int = MEMORY_CACHE_SIZE,
    ):
        self.store = store
        self.ttl = ttl
        self.bypass = bypass
        self._timer = timer
        self._memory: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl, timer=timer)
        self._lock = threading.Lock()

    @classmethod
    def disabled(cls) -> "WeatherCache":
        """A cache that never stores anything."""
        return cls(store=None, bypass=True)

    @property
    def enabled(self) -> bool:
        return not self.bypass

    def get(self, key: str) -> Optional[WeatherObservation]:
        """Return a fresh cached observation for key, or None on a miss."""
        if self.bypass:
            return None

        now = self._timer()
        with self._lock:
            entry = self._memory.get(key)
        if entry is not None and not entry.is_expired(now):
            debug_logger.debug(f"Cache hit (memory) for {key}")
            return entry.value

        if self.store is None:
            return None

        entry = self.store.get(key)
        if entry is None:
            return None

        with self._lock:
            self._memory[key] = entry
        debug_logger.debug(f"Cache hit (disk) for {key}")
        return entry.value

    def set(self, key: str, observation: WeatherObservation) -> None:
        """Store an observation; a write failure is logged, never raised."""
        if self.bypass:
            return

        entry = CacheEntry(key=key, value=observation, stored_at=self._timer(), ttl=self.ttl)
        with self._lock:
            self._memory[key] = entry

        if self.store is None:
            return
        try:
            self.store.set(entry)
        except OSError as e:
            debug_logger.warning(f"Failed to write cache entry for {key}: {e}")

    def clear(self) -> None:
        """Drop the in-process layer (disk entries expire on their own)."""
        with self._lock:
            self._memory.clear()


def open_weather_cache(
    ttl: float = DEFAULT_CACHE_DURATION,
    enabled: bool = True,
    paths: Optional[Iterable[Path]] = None,
    timer: Callable[[], float] = time.time,
) -> WeatherCache:
    """
    Open the weather cache in the first usable directory.

    Falls back to a disabled cache when no directory works, so the
    pipeline degrades to uncached lookups instead of failing.

    Args:
        ttl: Entry lifetime in seconds
        enabled: False returns a disabled cache without touching the disk
        paths: Candidate directories (default: system then per-user cache dirs)
        timer: Clock used for freshness checks
    """
    if not enabled:
        return WeatherCache.disabled()

    for path in (paths if paths is not None else get_cache_paths()):
        try:
            store = DirectoryStore(path, timer=timer)
        except CacheUnavailable as e:
            debug_logger.warning(str(e))
            continue
        debug_logger.debug(f"Cache initialized in: {store.root}")
        return WeatherCache(store=store, ttl=ttl, timer=timer)

    debug_logger.warning("Failed to initialize cache - continuing without caching")
    return WeatherCache.disabled()
