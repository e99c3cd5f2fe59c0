"""
Cache Lookup Outcome

This module defines the four-way result returned by TTLCache.read():

    VALUE      - key holds a fresh value
    EMPTY      - key is declared but nothing was written yet (or it was cleared)
    UNDEFINED  - key was never declared (or was removed)
    EXPIRED    - key holds a value whose deadline has passed
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class MissingValueError(RuntimeError):
    """Raised by CacheOutcome.unwrap() when the outcome carries no value."""

    def __init__(self, kind: "OutcomeKind"):
        super().__init__(f"There is no value for unwrap (outcome is {kind.name})")
        self.kind = kind


class OutcomeKind(Enum):
    """Enumeration of lookup outcomes."""
    VALUE = auto()
    EMPTY = auto()
    UNDEFINED = auto()
    EXPIRED = auto()


@dataclass(frozen=True)
class CacheOutcome(Generic[T]):
    """
    Result of a cache lookup.

    Exactly one kind holds at a time. The payload is only meaningful for
    OutcomeKind.VALUE; a stored value of None is still a VALUE outcome.

    Attributes:
        kind: Which of the four outcomes this is
        value: The looked-up value (VALUE outcomes only)
    """
    kind: OutcomeKind
    value: Optional[T] = None

    @classmethod
    def of(cls, value: T) -> "CacheOutcome[T]":
        """Create a VALUE outcome."""
        return cls(kind=OutcomeKind.VALUE, value=value)

    @classmethod
    def empty(cls) -> "CacheOutcome[T]":
        """Create an EMPTY outcome."""
        return cls(kind=OutcomeKind.EMPTY)

    @classmethod
    def undefined(cls) -> "CacheOutcome[T]":
        """Create an UNDEFINED outcome."""
        return cls(kind=OutcomeKind.UNDEFINED)

    @classmethod
    def expired(cls) -> "CacheOutcome[T]":
        """Create an EXPIRED outcome."""
        return cls(kind=OutcomeKind.EXPIRED)

    def unwrap(self) -> T:
        """
        Return the value, or raise if there is none.

        Raises:
            MissingValueError: if the outcome is EMPTY, UNDEFINED or EXPIRED.
                This is a caller bug: check the outcome (or use unwrap_or)
                before unwrapping.
        """
        if self.kind is OutcomeKind.VALUE:
            return self.value
        raise MissingValueError(self.kind)

    def unwrap_or(self, default: T) -> T:
        """Return the value, or `default` for any non-VALUE outcome."""
        if self.kind is OutcomeKind.VALUE:
            return self.value
        return default

    def is_value(self) -> bool:
        return self.kind is OutcomeKind.VALUE

    def is_empty(self) -> bool:
        return self.kind is OutcomeKind.EMPTY

    def is_undefined(self) -> bool:
        return self.kind is OutcomeKind.UNDEFINED

    def is_expired(self) -> bool:
        return self.kind is OutcomeKind.EXPIRED
