"""
AssertionReporter – Turns a terminal outcome into an AssertionResult and
raises on failure.

The reporter has no side effects besides raising: no logging, no
screenshots. Those belong to whatever harness catches the failure.
"""

from __future__ import annotations

from typing import Any, Optional

from uiverify.conditions import Condition
from uiverify.errors import AssertionFailed, AssertionTimeout
from uiverify.models import AssertionResult, PollOutcome


class AssertionReporter:
    """Formats expected-vs-observed messages and raises structured failures."""

    @staticmethod
    def compose(default: str, message: Optional[str] = None) -> str:
        """Caller context first, generated detail after."""
        return f"{message}: {default}" if message else default

    def from_outcome(
        self,
        outcome: PollOutcome,
        condition: Condition,
        target_desc: str,
        expected: Any = None,
        arg: Any = None,
        message: Optional[str] = None,
    ) -> AssertionResult:
        observation = outcome.observation
        expected_value = condition.expected_state if condition.is_state else expected
        result = AssertionResult(
            passed=outcome.satisfied,
            observed_value=observation.observed_value,
            expected_value=expected_value,
            condition=condition.name,
            attempts=outcome.attempts,
            elapsed_ms=outcome.elapsed_ms,
        )
        if not outcome.satisfied:
            detail = condition.describe_failure(observation, expected, arg)
            result.message = self.compose(f"{target_desc} {detail}", message)
        return result

    def report(self, result: AssertionResult, polled: bool = True) -> AssertionResult:
        """Return *result* when it passed; raise otherwise."""
        if result.passed:
            return result
        if polled:
            raise AssertionTimeout(result)
        raise AssertionFailed(result)
