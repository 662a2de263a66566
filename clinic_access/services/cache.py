"""Time-to-live snapshot cache shared by the settings and permission caches.

Purpose:
Avoid a database round-trip on every settings lookup or permission check.

How It Works:
- Cache hit: the snapshot exists and has not expired, it is served as-is.
- Cache miss: the snapshot is absent or older than the TTL, the whole table is
  reloaded synchronously and swapped in as a new snapshot.
- Invalidation: every write drops the snapshot, so the next read in this
  process reloads (read-after-write for the writer).
- Reload failure: an empty snapshot is installed and the failure is recorded
  in ``last_reload``; callers see "absent" and fall back to their defaults.
  The empty snapshot is not given a lifetime, so the next read retries.

Snapshots are never mutated after construction. Readers take a local
reference, so a concurrent reload can never expose a half-built mapping.
Other processes see a write up to one TTL late.
"""
import threading
import time
from types import MappingProxyType
from typing import Callable, Mapping, NamedTuple, Optional
from clinic_access.core.enums import ReloadStatus
from clinic_access.core.exceptions import StoreUnavailable
from clinic_access.core.logging_config import logger

CACHE_TTL_SECONDS = 5 * 60

_EMPTY = MappingProxyType({})


class Snapshot(NamedTuple):
    data: Mapping
    expires_at: Optional[float]  # None means "already stale"


class ReloadOutcome(NamedTuple):
    status: ReloadStatus
    error: Optional[str] = None


class SnapshotCache:
    """Base class: subclasses implement ``_load`` returning a complete mapping."""

    name = "cache"

    def __init__(self, clock: Callable[[], float] = time.monotonic, ttl_seconds: float = CACHE_TTL_SECONDS):
        self._clock = clock
        self.ttl_seconds = ttl_seconds
        self._snapshot: Optional[Snapshot] = None
        self._lock = threading.Lock()
        self._generation = 0
        self.last_reload = ReloadOutcome(ReloadStatus.NEVER)

    def _load(self) -> Mapping:
        raise NotImplementedError

    def _is_fresh(self, snapshot: Optional[Snapshot]) -> bool:
        return (
            snapshot is not None
            and snapshot.expires_at is not None
            and self._clock() <= snapshot.expires_at
        )

    @property
    def is_stale(self) -> bool:
        return not self._is_fresh(self._snapshot)

    def snapshot(self) -> Mapping:
        """Return the current data, reloading first if it is absent or expired."""
        snapshot = self._snapshot
        if self._is_fresh(snapshot):
            return snapshot.data
        with self._lock:
            # Another thread may have reloaded while we waited.
            snapshot = self._snapshot
            if self._is_fresh(snapshot):
                return snapshot.data
            return self._reload_locked().data

    def refresh(self) -> ReloadOutcome:
        """Force a reload now and report how it went."""
        with self._lock:
            self._reload_locked()
        return self.last_reload

    def invalidate(self) -> None:
        """Drop the snapshot; the next read reloads from the store."""
        self._generation += 1
        self._snapshot = None
        logger.debug(f"{self.name} invalidated")

    def _reload_locked(self) -> Snapshot:
        generation = self._generation
        try:
            data = MappingProxyType(dict(self._load()))
        except StoreUnavailable as e:
            logger.warning(f"{self.name} reload failed, serving empty snapshot: {e}")
            snapshot = Snapshot(_EMPTY, None)
            self.last_reload = ReloadOutcome(ReloadStatus.FAILED, str(e))
        else:
            # A write that landed during the load leaves this snapshot already stale.
            expires_at = self._clock() + self.ttl_seconds if generation == self._generation else None
            snapshot = Snapshot(data, expires_at)
            self.last_reload = ReloadOutcome(ReloadStatus.LOADED)
            logger.debug(f"{self.name} reloaded: {len(data)} entries")
        self._snapshot = snapshot
        return snapshot
