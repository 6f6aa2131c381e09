"""
Comparator – Matches an observed value against an expected value.

Modes:
  exact, contains, regex, member, attribute_equals, attribute_exists,
  greater_than, less_than, subset

Regex mode uses search semantics (partial match unless the pattern is
anchored) and never falls back to substring matching. Contains mode is
case-sensitive.
"""

from __future__ import annotations

import re
from collections.abc import Collection, Mapping
from numbers import Number
from typing import Any

from uiverify.errors import ComparatorTypeMismatch
from uiverify.models import ComparatorMode


class Comparator:
    """Stateless comparison strategies keyed by ComparatorMode."""

    # ------------------------------------------------------------------
    # Validation (fails fast, before any polling)
    # ------------------------------------------------------------------

    @staticmethod
    def validate(expected: Any, mode: ComparatorMode) -> None:
        match mode:
            case ComparatorMode.REGEX:
                Comparator._pattern(expected)
            case ComparatorMode.ATTRIBUTE_EQUALS:
                if isinstance(expected, re.Pattern):
                    return
                if not isinstance(expected, str):
                    raise ComparatorTypeMismatch(
                        f"Attribute value must be a string or pattern, got {type(expected).__name__}"
                    )
            case ComparatorMode.CONTAINS:
                if not isinstance(expected, str):
                    raise ComparatorTypeMismatch(
                        f"Contains mode needs a string, got {type(expected).__name__}"
                    )
            case ComparatorMode.GREATER_THAN | ComparatorMode.LESS_THAN:
                if isinstance(expected, bool) or not isinstance(expected, Number):
                    raise ComparatorTypeMismatch(
                        f"Bound must be a number, got {type(expected).__name__}"
                    )

    @staticmethod
    def _pattern(expected: Any) -> re.Pattern:
        if isinstance(expected, re.Pattern):
            return expected
        if not isinstance(expected, str):
            raise ComparatorTypeMismatch(
                f"Regex mode needs a pattern, got {type(expected).__name__}"
            )
        try:
            return re.compile(expected)
        except re.error as e:
            raise ComparatorTypeMismatch(f"Invalid pattern {expected!r}: {e}") from e

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    @staticmethod
    def compare(observed: Any, expected: Any, mode: ComparatorMode) -> bool:
        match mode:
            case ComparatorMode.EXACT:
                return observed == expected
            case ComparatorMode.CONTAINS:
                return isinstance(observed, str) and expected in observed
            case ComparatorMode.REGEX:
                if observed is None:
                    return False
                return Comparator._pattern(expected).search(str(observed)) is not None
            case ComparatorMode.MEMBER:
                return isinstance(observed, Collection) and expected in observed
            case ComparatorMode.ATTRIBUTE_EXISTS:
                return observed is not None
            case ComparatorMode.ATTRIBUTE_EQUALS:
                if observed is None:
                    return False
                if isinstance(expected, re.Pattern):
                    return expected.search(observed) is not None
                return observed == expected
            case ComparatorMode.GREATER_THAN:
                return observed is not None and observed > expected
            case ComparatorMode.LESS_THAN:
                return observed is not None and observed < expected
            case ComparatorMode.SUBSET:
                return Comparator._matches_subset(observed, expected)
        raise ComparatorTypeMismatch(f"Unknown comparator mode: {mode}")

    @staticmethod
    def _matches_subset(observed: Any, expected: Any) -> bool:
        """Recursive object match: every expected key present and matching."""
        if isinstance(expected, Mapping):
            if not isinstance(observed, Mapping):
                return False
            return all(
                key in observed and Comparator._matches_subset(observed[key], value)
                for key, value in expected.items()
            )
        if isinstance(expected, list):
            if not isinstance(observed, list) or len(observed) != len(expected):
                return False
            return all(
                Comparator._matches_subset(o, e) for o, e in zip(observed, expected)
            )
        return observed == expected

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    @staticmethod
    def expectation(expected: Any, mode: ComparatorMode, negate: bool = False) -> str:
        """Phrase for what was expected, e.g. "to contain 'Save'"."""
        prefix = "not " if negate else ""
        match mode:
            case ComparatorMode.EXACT:
                phrase = f"to be {expected!r}"
            case ComparatorMode.CONTAINS:
                phrase = f"to contain {expected!r}"
            case ComparatorMode.REGEX:
                phrase = f"to match /{Comparator._source(expected)}/"
            case ComparatorMode.MEMBER:
                phrase = f"to include {expected!r}"
            case ComparatorMode.ATTRIBUTE_EXISTS:
                phrase = "to be present"
            case ComparatorMode.ATTRIBUTE_EQUALS:
                if isinstance(expected, re.Pattern):
                    phrase = f"to match /{expected.pattern}/"
                else:
                    phrase = f"to be {expected!r}"
            case ComparatorMode.GREATER_THAN:
                phrase = f"to be greater than {expected!r}"
            case ComparatorMode.LESS_THAN:
                phrase = f"to be less than {expected!r}"
            case ComparatorMode.SUBSET:
                phrase = f"to match object {expected!r}"
            case _:
                phrase = f"to satisfy {mode.value} {expected!r}"
        return prefix + phrase

    @staticmethod
    def describe(
        observed: Any, expected: Any, mode: ComparatorMode, negate: bool = False
    ) -> str:
        """Human-readable mismatch, e.g. "expected to be 'Jane', but got 'John'"."""
        expectation = Comparator.expectation(expected, mode, negate)
        if mode in (ComparatorMode.ATTRIBUTE_EXISTS, ComparatorMode.ATTRIBUTE_EQUALS):
            if observed is None:
                return f"expected {expectation}, but it was absent"
        return f"expected {expectation}, but got {observed!r}"

    @staticmethod
    def _source(expected: Any) -> str:
        if isinstance(expected, re.Pattern):
            return expected.pattern
        return str(expected)
