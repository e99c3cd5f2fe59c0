"""Cache module for TTL-Cache."""

from .clock import WallClock, now_ms
from .outcome import CacheOutcome, MissingValueError, OutcomeKind
from .ttl_cache import Slot, SynchronizedTTLCache, TimedValue, TTLCache

__all__ = [
    "CacheOutcome",
    "MissingValueError",
    "OutcomeKind",
    "Slot",
    "SynchronizedTTLCache",
    "TimedValue",
    "TTLCache",
    "WallClock",
    "now_ms",
]
