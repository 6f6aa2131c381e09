"""
ResponseAssertion – Checks on an already-received HTTP response.

A response is immutable once received, so every check runs exactly once.
Works with Playwright's APIResponse / Response (``status`` and ``headers``
properties, awaitable ``json()``).
"""

from __future__ import annotations

from typing import Any, Optional

from uiverify.comparator import Comparator
from uiverify.models import AssertionResult, ComparatorMode
from uiverify.reporter import AssertionReporter


class ResponseAssertion:
    def __init__(self, reporter: AssertionReporter) -> None:
        self._reporter = reporter

    def assert_status(
        self, response: Any, expected_status: int, message: Optional[str] = None
    ) -> AssertionResult:
        actual = response.status
        return self._finish(
            "response_status",
            actual == expected_status,
            expected_status,
            actual,
            f"Expected status {expected_status}, but got {actual}.",
            message,
        )

    def assert_header(
        self,
        response: Any,
        header_name: str,
        expected_value: str,
        message: Optional[str] = None,
    ) -> AssertionResult:
        # Playwright lower-cases header names.
        actual = response.headers.get(header_name.lower())
        return self._finish(
            "response_header",
            actual == expected_value,
            expected_value,
            actual,
            f"Expected header {header_name} to be {expected_value}, but got {actual}.",
            message,
        )

    async def assert_contains(
        self, response: Any, expected_data: Any, message: Optional[str] = None
    ) -> AssertionResult:
        body = await response.json()
        matched = Comparator.compare(body, expected_data, ComparatorMode.SUBSET)
        return self._finish(
            "response_contains",
            matched,
            expected_data,
            body,
            f"Expected response body to match {expected_data!r}, but got {body!r}.",
            message,
        )

    def _finish(
        self,
        name: str,
        passed: bool,
        expected: Any,
        observed: Any,
        default_message: str,
        message: Optional[str],
    ) -> AssertionResult:
        result = AssertionResult(
            passed=passed,
            expected_value=expected,
            observed_value=observed,
            condition=name,
            attempts=1,
        )
        if not passed:
            result.message = self._reporter.compose(default_message, message)
        return self._reporter.report(result, polled=False)
