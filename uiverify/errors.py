"""
Error taxonomy for the verification layer.

  AssertionTimeout          – polled condition never held before the deadline.
  TargetResolutionAmbiguous – driver reported a selector matching several
                              elements where exactly one was required.
  ComparatorTypeMismatch    – caller passed an expected value the comparator
                              mode cannot use; raised before any polling.
  DriverError               – browser / driver failure; never retried.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uiverify.models import AssertionResult


class VerificationError(Exception):
    """Base class for errors that are not assertion failures."""


class AssertionFailed(AssertionError):
    """A condition evaluated once (or polled) did not hold."""

    def __init__(self, result: AssertionResult) -> None:
        super().__init__(result.message)
        self.result = result

    @property
    def expected(self):
        return self.result.expected_value

    @property
    def observed(self):
        return self.result.observed_value


class AssertionTimeout(AssertionFailed):
    """A polled condition was still unsatisfied when the deadline elapsed."""


class TargetResolutionAmbiguous(VerificationError):
    pass


class ComparatorTypeMismatch(VerificationError, TypeError):
    pass


class DriverError(VerificationError):
    pass
