"""
Tests for CacheOutcome

These tests verify the four-way lookup result:
- Exactly one predicate holds per outcome
- unwrap() returns the value or raises MissingValueError
- unwrap_or() falls back to the default for every non-value outcome

Run with: python -m pytest tests/test_outcome.py -v
"""

import pytest
from src.cache.outcome import CacheOutcome, MissingValueError, OutcomeKind


ALL_OUTCOMES = {
    "value": CacheOutcome.of("v"),
    "empty": CacheOutcome.empty(),
    "undefined": CacheOutcome.undefined(),
    "expired": CacheOutcome.expired(),
}


class TestOutcomePredicates:
    """Test is_value/is_empty/is_undefined/is_expired."""

    @pytest.mark.parametrize("name", sorted(ALL_OUTCOMES))
    def test_exactly_one_predicate_holds(self, name):
        """Test each outcome answers True to its own predicate only."""
        outcome = ALL_OUTCOMES[name]
        answers = {
            "value": outcome.is_value(),
            "empty": outcome.is_empty(),
            "undefined": outcome.is_undefined(),
            "expired": outcome.is_expired(),
        }

        assert answers.pop(name) is True
        assert not any(answers.values())

    def test_kinds(self):
        """Test the factory methods set the expected kind."""
        assert CacheOutcome.of(1).kind is OutcomeKind.VALUE
        assert CacheOutcome.empty().kind is OutcomeKind.EMPTY
        assert CacheOutcome.undefined().kind is OutcomeKind.UNDEFINED
        assert CacheOutcome.expired().kind is OutcomeKind.EXPIRED

    def test_none_is_still_a_value(self):
        """Test a stored None is a VALUE outcome, not an empty one."""
        outcome = CacheOutcome.of(None)

        assert outcome.is_value()
        assert outcome.unwrap() is None


class TestOutcomeUnwrap:
    """Test unwrap() and unwrap_or()."""

    def test_unwrap_value(self):
        assert CacheOutcome.of("hello").unwrap() == "hello"

    @pytest.mark.parametrize("name", ["empty", "undefined", "expired"])
    def test_unwrap_without_value_raises(self, name):
        """Test unwrap() on a non-value outcome is a fault."""
        with pytest.raises(MissingValueError) as excinfo:
            ALL_OUTCOMES[name].unwrap()

        assert excinfo.value.kind.name.lower() == name

    def test_missing_value_is_runtime_error(self):
        with pytest.raises(RuntimeError):
            CacheOutcome.empty().unwrap()

    def test_unwrap_or_value(self):
        assert CacheOutcome.of("v").unwrap_or("default") == "v"

    @pytest.mark.parametrize("name", ["empty", "undefined", "expired"])
    def test_unwrap_or_default(self, name):
        """Test unwrap_or() treats every non-value outcome the same."""
        assert ALL_OUTCOMES[name].unwrap_or("default") == "default"


class TestOutcomeEquality:
    """Test outcomes compare by kind and payload."""

    def test_equal_values(self):
        assert CacheOutcome.of([1, 2]) == CacheOutcome.of([1, 2])

    def test_different_values(self):
        assert CacheOutcome.of("a") != CacheOutcome.of("b")

    def test_different_kinds(self):
        assert CacheOutcome.empty() != CacheOutcome.undefined()
        assert CacheOutcome.expired() == CacheOutcome.expired()
