"""
Unit tests for Comparator: modes, validation and failure descriptions.
"""

import re
import unittest

from uiverify.comparator import Comparator
from uiverify.errors import ComparatorTypeMismatch
from uiverify.models import ComparatorMode as Mode


class TestExactAndContains(unittest.TestCase):
    def test_exact_is_reflexive(self) -> None:
        for value in ["", "John Doe", 0, 42, None, True, ["a"], {"k": 1}]:
            self.assertTrue(Comparator.compare(value, value, Mode.EXACT), value)

    def test_exact_mismatch(self) -> None:
        self.assertFalse(Comparator.compare("John Doe", "Jane", Mode.EXACT))

    def test_contains_substring(self) -> None:
        self.assertTrue(Comparator.compare("Name: John Doe", "John", Mode.CONTAINS))

    def test_contains_is_case_sensitive(self) -> None:
        self.assertFalse(Comparator.compare("Name: John Doe", "john", Mode.CONTAINS))

    def test_contains_on_non_string_observed(self) -> None:
        self.assertFalse(Comparator.compare(None, "x", Mode.CONTAINS))


class TestRegex(unittest.TestCase):
    def test_partial_match_allowed(self) -> None:
        self.assertTrue(Comparator.compare("Order #1234 placed", r"#\d+", Mode.REGEX))

    def test_anchored_pattern_is_respected(self) -> None:
        self.assertFalse(Comparator.compare("Order #1234", r"^\d+$", Mode.REGEX))

    def test_compiled_pattern(self) -> None:
        pattern = re.compile(r"elements|forms", re.IGNORECASE)
        self.assertTrue(Comparator.compare("Forms", pattern, Mode.REGEX))

    def test_no_substring_fallback(self) -> None:
        # "1+1" is a literal substring but the pattern needs "11".
        self.assertTrue(Comparator.compare("1+1", "1+1", Mode.CONTAINS))
        self.assertFalse(Comparator.compare("1+1", "1+1", Mode.REGEX))

    def test_none_observed_never_matches(self) -> None:
        self.assertFalse(Comparator.compare(None, ".*", Mode.REGEX))


class TestAttributeModes(unittest.TestCase):
    def test_present_empty_satisfies_both(self) -> None:
        self.assertTrue(Comparator.compare("", None, Mode.ATTRIBUTE_EXISTS))
        self.assertTrue(Comparator.compare("", "", Mode.ATTRIBUTE_EQUALS))

    def test_absent_satisfies_neither(self) -> None:
        self.assertFalse(Comparator.compare(None, None, Mode.ATTRIBUTE_EXISTS))
        self.assertFalse(Comparator.compare(None, "", Mode.ATTRIBUTE_EQUALS))

    def test_attribute_equals_with_pattern(self) -> None:
        self.assertTrue(
            Comparator.compare("btn-primary", re.compile("primary"), Mode.ATTRIBUTE_EQUALS)
        )


class TestMemberThresholdSubset(unittest.TestCase):
    def test_member(self) -> None:
        self.assertTrue(Comparator.compare(["btn", "active"], "active", Mode.MEMBER))
        self.assertFalse(Comparator.compare(["btn-active"], "active", Mode.MEMBER))

    def test_strict_greater_than(self) -> None:
        self.assertFalse(Comparator.compare(3, 3, Mode.GREATER_THAN))
        self.assertTrue(Comparator.compare(4, 3, Mode.GREATER_THAN))

    def test_strict_less_than(self) -> None:
        self.assertFalse(Comparator.compare(3, 3, Mode.LESS_THAN))
        self.assertTrue(Comparator.compare(2, 3, Mode.LESS_THAN))

    def test_subset_nested(self) -> None:
        body = {"user": {"id": 7, "name": "Ann", "roles": ["a", "b"]}, "ok": True}
        self.assertTrue(Comparator.compare(body, {"user": {"name": "Ann"}}, Mode.SUBSET))
        self.assertTrue(
            Comparator.compare(body, {"user": {"roles": ["a", "b"]}}, Mode.SUBSET)
        )
        self.assertFalse(Comparator.compare(body, {"user": {"roles": ["a"]}}, Mode.SUBSET))
        self.assertFalse(Comparator.compare(body, {"missing": 1}, Mode.SUBSET))


class TestValidation(unittest.TestCase):
    def test_regex_rejects_non_pattern(self) -> None:
        with self.assertRaises(ComparatorTypeMismatch):
            Comparator.validate(123, Mode.REGEX)

    def test_regex_rejects_invalid_pattern(self) -> None:
        with self.assertRaises(ComparatorTypeMismatch):
            Comparator.validate("(unclosed", Mode.REGEX)

    def test_contains_rejects_non_string(self) -> None:
        with self.assertRaises(ComparatorTypeMismatch):
            Comparator.validate(5, Mode.CONTAINS)

    def test_bound_must_be_number(self) -> None:
        with self.assertRaises(ComparatorTypeMismatch):
            Comparator.validate("3", Mode.GREATER_THAN)

    def test_mismatch_is_a_type_error(self) -> None:
        self.assertTrue(issubclass(ComparatorTypeMismatch, TypeError))

    def test_valid_values_pass(self) -> None:
        Comparator.validate("x", Mode.CONTAINS)
        Comparator.validate(re.compile("x"), Mode.REGEX)
        Comparator.validate(3, Mode.LESS_THAN)
        Comparator.validate(object(), Mode.EXACT)


class TestDescribe(unittest.TestCase):
    def test_exact(self) -> None:
        self.assertEqual(
            Comparator.describe("John Doe", "Jane", Mode.EXACT),
            "expected to be 'Jane', but got 'John Doe'",
        )

    def test_negated_contains(self) -> None:
        self.assertEqual(
            Comparator.describe("Error!", "Error", Mode.CONTAINS, negate=True),
            "expected not to contain 'Error', but got 'Error!'",
        )

    def test_absent_attribute(self) -> None:
        self.assertEqual(
            Comparator.describe(None, "", Mode.ATTRIBUTE_EQUALS),
            "expected to be '', but it was absent",
        )

    def test_regex(self) -> None:
        self.assertIn("/^a/", Comparator.describe("b", re.compile("^a"), Mode.REGEX))


if __name__ == "__main__":
    unittest.main()
