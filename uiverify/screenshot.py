"""
ScreenshotAssertion – Single-shot visual comparison.

Pixel diffing belongs to the driver side: a ScreenshotComparer is
injected and asked once. No polling happens here.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol

from uiverify.errors import DriverError
from uiverify.models import AssertionResult, ScreenshotComparison
from uiverify.reporter import AssertionReporter


class ScreenshotComparer(Protocol):
    async def __call__(
        self, handle: Any, baseline_name: str, options: dict[str, Any]
    ) -> ScreenshotComparison: ...


class ScreenshotAssertion:
    def __init__(
        self,
        reporter: AssertionReporter,
        comparer: Optional[ScreenshotComparer] = None,
    ) -> None:
        self._reporter = reporter
        self._comparer = comparer

    async def assert_matches(
        self,
        handle: Any,
        baseline_name: str,
        options: Optional[dict[str, Any]] = None,
        message: Optional[str] = None,
        target_desc: str = "page",
    ) -> AssertionResult:
        if self._comparer is None:
            raise DriverError("No screenshot comparer configured")

        comparison = await self._comparer(handle, baseline_name, dict(options or {}))
        result = AssertionResult(
            passed=comparison.matches,
            expected_value=baseline_name,
            observed_value=comparison.diff_artifact,
            condition="screenshot",
            attempts=1,
            diff_artifact=comparison.diff_artifact,
        )
        if not comparison.matches:
            result.message = self._reporter.compose(
                f"{target_desc} does not match screenshot baseline '{baseline_name}'",
                message,
            )
        return self._reporter.report(result, polled=False)
