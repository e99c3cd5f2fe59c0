"""
TTL Cache Module

This module implements the in-process TTL key/value cache.

Every key is in one of three states:
- absent (never declared, or removed)
- declared but empty (declared, or cleared)
- declared with a timed value (written)

Expiry is evaluated lazily at read time and never deletes an entry; a stale
value stays stored until it is overwritten, cleared or removed.
"""

import copy
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from .clock import now_ms
from .outcome import CacheOutcome

T = TypeVar("T")


@dataclass(frozen=True)
class TimedValue(Generic[T]):
    """A stored value and its absolute deadline in epoch milliseconds."""
    value: T
    expires_at: int

    def is_fresh(self, now: int) -> bool:
        # A read at the exact deadline still counts as fresh
        return self.expires_at >= now


@dataclass(frozen=True)
class Slot(Generic[T]):
    """
    Per-key storage state.

    timed_value is None for a declared-but-empty key.
    """
    timed_value: Optional[TimedValue[T]] = None

    @property
    def is_empty(self) -> bool:
        return self.timed_value is None


_EMPTY_SLOT: Slot = Slot()


class TTLCache(Generic[T]):
    """
    In-memory key/value cache with a fixed time-to-live.

    The TTL is applied uniformly at write time: each write stamps the value
    with `now + ttl`. Reads classify the entry into one of four outcomes
    (see CacheOutcome) without mutating the cache.

    Values are deep-copied on the way in and on the way out, so neither the
    caller's original object nor a read result shares state with the cache.

    This class does no locking. Use SynchronizedTTLCache when the cache is
    shared between threads.

    Attributes:
        ttl: Time-to-live in milliseconds (zero or negative is allowed)
    """

    def __init__(self, ttl: int, clock: Optional[Callable[[], int]] = None):
        """
        Initialize the cache.

        Args:
            ttl: Time-to-live in milliseconds, stored verbatim
            clock: Callable returning the current time in epoch milliseconds
                   (defaults to the shared wall clock)
        """
        self._ttl = ttl
        self._clock = clock if clock is not None else now_ms
        self._entries: Dict[str, Slot[T]] = {}

    @property
    def ttl(self) -> int:
        return self._ttl

    def declare(self, key: str) -> None:
        """
        Declare a key as present but empty.

        Re-declaring an existing key resets it and drops any stored value.
        """
        self._entries[key] = _EMPTY_SLOT

    def write(self, key: str, value: T) -> None:
        """
        Store a value under `key`, stamped with `now + ttl`.

        Writing to an undeclared key declares it implicitly.
        """
        expires_at = self._clock() + self._ttl
        self._entries[key] = Slot(TimedValue(copy.deepcopy(value), expires_at))

    def read(self, key: str) -> CacheOutcome[T]:
        """
        Look up a key.

        Args:
            key: The key to look up

        Returns:
            CacheOutcome.undefined() if the key was never declared,
            CacheOutcome.empty() if it is declared without a value,
            CacheOutcome.of(copy) if the value is still fresh,
            CacheOutcome.expired() if its deadline has passed.
        """
        slot = self._entries.get(key)
        if slot is None:
            return CacheOutcome.undefined()
        if slot.is_empty:
            return CacheOutcome.empty()

        timed = slot.timed_value
        if timed.is_fresh(self._clock()):
            return CacheOutcome.of(copy.deepcopy(timed.value))
        return CacheOutcome.expired()

    def remove(self, key: str) -> Optional[Slot[T]]:
        """
        Delete a key entirely.

        Returns:
            The removed slot (fresh, stale or empty alike), or None if the
            key was not declared
        """
        return self._entries.pop(key, None)

    def clear(self, key: str) -> None:
        """Reset a declared key to empty. Undeclared keys are left alone."""
        if key in self._entries:
            self._entries[key] = _EMPTY_SLOT

    def keys(self) -> List[str]:
        """Return all declared keys, including empty and stale ones."""
        return list(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the cache.

        Returns:
            Dictionary containing:
            - total_keys: Declared keys
            - empty_keys: Declared keys without a value
            - fresh_keys: Keys whose value is still fresh
            - expired_keys: Keys whose value is past its deadline
            - ttl_ms: The cache TTL
        """
        now = self._clock()
        empty = fresh = 0
        for slot in self._entries.values():
            if slot.is_empty:
                empty += 1
            elif slot.timed_value.is_fresh(now):
                fresh += 1

        total = len(self._entries)
        return {
            "total_keys": total,
            "empty_keys": empty,
            "fresh_keys": fresh,
            "expired_keys": total - empty - fresh,
            "ttl_ms": self._ttl,
        }


class SynchronizedTTLCache(TTLCache[T]):
    """TTLCache whose operations are serialized by a re-entrant lock."""

    def __init__(self, ttl: int, clock: Optional[Callable[[], int]] = None):
        super().__init__(ttl, clock=clock)
        self._lock = threading.RLock()

    def declare(self, key: str) -> None:
        with self._lock:
            super().declare(key)

    def write(self, key: str, value: T) -> None:
        with self._lock:
            super().write(key, value)

    def read(self, key: str) -> CacheOutcome[T]:
        with self._lock:
            return super().read(key)

    def remove(self, key: str) -> Optional[Slot[T]]:
        with self._lock:
            return super().remove(key)

    def clear(self, key: str) -> None:
        with self._lock:
            super().clear(key)

    def keys(self) -> List[str]:
        with self._lock:
            return super().keys()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return super().__contains__(key)

    def __len__(self) -> int:
        with self._lock:
            return super().__len__()

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            return super().get_stats()
