from __future__ import annotations

from dataclasses import dataclass
import time
from threading import Lock
from typing import Callable, Dict, Generic, Hashable, Optional, TypeVar


T = TypeVar("T")


@dataclass(frozen=True)
class _Entry(Generic[T]):
    expires_at: float
    value: T


class TTLCache(Generic[T]):
    """Small in-process cache for upstream responses.

    A TTL of zero (or less) means "don't cache": ``set`` becomes a no-op and
    ``get_or_set`` always recomputes.
    """

    def __init__(self, *, default_ttl_seconds: int = 60, maxsize: int = 1024, clock: Callable[[], float] = time.monotonic) -> None:
        self.default_ttl_seconds = default_ttl_seconds
        self.maxsize = maxsize
        self._clock = clock
        self._lock = Lock()
        self._data: Dict[Hashable, _Entry[T]] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def _lookup(self, key: Hashable) -> Optional[_Entry[T]]:
        now = self._clock()
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            if entry.expires_at <= now:
                del self._data[key]
                return None
            return entry

    def get(self, key: Hashable) -> Optional[T]:
        entry = self._lookup(key)
        return entry.value if entry is not None else None

    def set(self, key: Hashable, value: T, *, ttl_seconds: int | None = None) -> None:
        ttl = self.default_ttl_seconds if ttl_seconds is None else ttl_seconds
        if ttl <= 0:
            return
        expires_at = self._clock() + ttl
        with self._lock:
            if key not in self._data and len(self._data) >= self.maxsize:
                self._evict_one_locked()
            self._data[key] = _Entry(expires_at=expires_at, value=value)

    def get_or_set(self, key: Hashable, compute: Callable[[], T], *, ttl_seconds: int | None = None) -> T:
        # Entries are looked up directly so cached empty results still count as hits.
        entry = self._lookup(key)
        if entry is not None:
            return entry.value
        value = compute()
        self.set(key, value, ttl_seconds=ttl_seconds)
        return value

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def _evict_one_locked(self) -> None:
        now = self._clock()
        expired = [k for k, v in self._data.items() if v.expires_at <= now]
        if expired:
            for k in expired:
                del self._data[k]
            return
        if self._data:
            soonest = min(self._data.items(), key=lambda kv: kv[1].expires_at)[0]
            del self._data[soonest]
