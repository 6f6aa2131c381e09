"""
AssertionManager – Caller-facing entry points, one per catalog condition.

Every element assertion accepts a selector string, a TargetRef or a
Playwright Locator, an optional context message and an optional timeout
override (ms). Polled assertions retry until satisfied or timed out;
response and screenshot assertions run once.

Usage:
    verify = AssertionManager(page)
    await verify.assert_element_visible("#userName", "Full Name input should be visible")
    await verify.assert_input_value("#userName", "John Doe")
    await verify.assert_response_status(response, 200)
"""

from __future__ import annotations

import logging
import re
import time
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, Sequence, Union

from playwright.async_api import Page

from uiverify import conditions
from uiverify.conditions import Condition
from uiverify.dialogs import DialogExpectation
from uiverify.models import (
    AssertionResult,
    ComparatorMode,
    PollPolicy,
    TargetRef,
    TargetScope,
    VerifierConfig,
)
from uiverify.polling import PollingEngine
from uiverify.reporter import AssertionReporter
from uiverify.resolver import LocatorResolver
from uiverify.response import ResponseAssertion
from uiverify.screenshot import ScreenshotAssertion, ScreenshotComparer

logger = logging.getLogger(__name__)

Target = Union[str, TargetRef, Any]
TextOrPattern = Union[str, re.Pattern]


class AssertionManager:
    """Wires resolver, polling engine and reporter together for one page."""

    def __init__(
        self,
        page: Page,
        config: Optional[VerifierConfig] = None,
        screenshot_comparer: Optional[ScreenshotComparer] = None,
        clock: Optional[Callable[[], float]] = None,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
    ) -> None:
        self._page = page
        self._config = config or VerifierConfig()

        # Sub-components
        self._resolver = LocatorResolver(page)
        self._reporter = AssertionReporter()
        engine_kwargs: dict[str, Any] = {}
        if clock is not None:
            engine_kwargs["clock"] = clock
        if sleep is not None:
            engine_kwargs["sleep"] = sleep
        self._engine = PollingEngine(self._resolver, self._config, **engine_kwargs)
        self._responses = ResponseAssertion(self._reporter)
        self._screenshots = ScreenshotAssertion(self._reporter, screenshot_comparer)

    @property
    def config(self) -> VerifierConfig:
        return self._config

    @property
    def resolver(self) -> LocatorResolver:
        return self._resolver

    # ------------------------------------------------------------------
    # Core: one polled condition
    # ------------------------------------------------------------------

    async def check(
        self,
        condition: Condition,
        target: Optional[Target] = None,
        expected: Any = None,
        message: Optional[str] = None,
        timeout: Optional[int] = None,
        arg: Any = None,
    ) -> AssertionResult:
        """Poll *condition* and raise AssertionTimeout if it never holds."""
        if condition.scope == TargetScope.PAGE:
            ref = self._resolver.page_ref()
            target_desc = "page"
        else:
            if target is None:
                raise ValueError(f"Condition {condition.name!r} needs a target element")
            ref = self._resolver.resolve(target)
            target_desc = self._resolver.describe(ref)

        # Fresh policy per call: composites never share a budget.
        policy = PollPolicy.from_config(self._config, timeout)
        outcome = await self._engine.evaluate(condition, ref, expected, policy, arg)
        result = self._reporter.from_outcome(
            outcome, condition, target_desc, expected, arg, message
        )
        return self._reporter.report(result)

    @staticmethod
    def _pattern_aware(condition: Condition, expected: Any) -> Condition:
        if isinstance(expected, re.Pattern):
            return condition.with_mode(ComparatorMode.REGEX)
        return condition

    # ------------------------------------------------------------------
    # Element visibility
    # ------------------------------------------------------------------

    async def assert_element_visible(
        self, locator: Target, message: Optional[str] = None, timeout: Optional[int] = None
    ) -> AssertionResult:
        return await self.check(conditions.VISIBLE, locator, message=message, timeout=timeout)

    async def assert_element_hidden(
        self, locator: Target, message: Optional[str] = None, timeout: Optional[int] = None
    ) -> AssertionResult:
        return await self.check(conditions.HIDDEN, locator, message=message, timeout=timeout)

    async def assert_element_attached(
        self, locator: Target, message: Optional[str] = None, timeout: Optional[int] = None
    ) -> AssertionResult:
        return await self.check(conditions.ATTACHED, locator, message=message, timeout=timeout)

    async def assert_element_detached(
        self, locator: Target, message: Optional[str] = None, timeout: Optional[int] = None
    ) -> AssertionResult:
        return await self.check(conditions.DETACHED, locator, message=message, timeout=timeout)

    # ------------------------------------------------------------------
    # Element state
    # ------------------------------------------------------------------

    async def assert_element_enabled(
        self, locator: Target, message: Optional[str] = None, timeout: Optional[int] = None
    ) -> AssertionResult:
        return await self.check(conditions.ENABLED, locator, message=message, timeout=timeout)

    async def assert_element_disabled(
        self, locator: Target, message: Optional[str] = None, timeout: Optional[int] = None
    ) -> AssertionResult:
        return await self.check(conditions.DISABLED, locator, message=message, timeout=timeout)

    async def assert_element_checked(
        self, locator: Target, message: Optional[str] = None, timeout: Optional[int] = None
    ) -> AssertionResult:
        return await self.check(conditions.CHECKED, locator, message=message, timeout=timeout)

    async def assert_element_unchecked(
        self, locator: Target, message: Optional[str] = None, timeout: Optional[int] = None
    ) -> AssertionResult:
        return await self.check(conditions.UNCHECKED, locator, message=message, timeout=timeout)

    async def assert_element_focused(
        self, locator: Target, message: Optional[str] = None, timeout: Optional[int] = None
    ) -> AssertionResult:
        return await self.check(conditions.FOCUSED, locator, message=message, timeout=timeout)

    async def assert_element_editable(
        self, locator: Target, message: Optional[str] = None, timeout: Optional[int] = None
    ) -> AssertionResult:
        return await self.check(conditions.EDITABLE, locator, message=message, timeout=timeout)

    # ------------------------------------------------------------------
    # Text content
    # ------------------------------------------------------------------

    async def assert_element_contains_text(
        self,
        locator: Target,
        expected_text: str,
        message: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> AssertionResult:
        return await self.check(
            conditions.CONTAINS_TEXT, locator, expected_text, message, timeout
        )

    async def assert_element_has_text(
        self,
        locator: Target,
        expected_text: TextOrPattern,
        message: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> AssertionResult:
        condition = self._pattern_aware(conditions.HAS_TEXT, expected_text)
        return await self.check(condition, locator, expected_text, message, timeout)

    async def assert_element_not_contain_text(
        self,
        locator: Target,
        unexpected_text: str,
        message: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> AssertionResult:
        return await self.check(
            conditions.NOT_CONTAINS_TEXT, locator, unexpected_text, message, timeout
        )

    async def assert_element_text_matches(
        self,
        locator: Target,
        pattern: TextOrPattern,
        message: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> AssertionResult:
        return await self.check(conditions.TEXT_MATCHES, locator, pattern, message, timeout)

    # ------------------------------------------------------------------
    # Input value
    # ------------------------------------------------------------------

    async def assert_input_value(
        self,
        locator: Target,
        expected_value: TextOrPattern,
        message: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> AssertionResult:
        condition = self._pattern_aware(conditions.VALUE_EQUALS, expected_value)
        return await self.check(condition, locator, expected_value, message, timeout)

    async def assert_input_not_value(
        self,
        locator: Target,
        unexpected_value: str,
        message: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> AssertionResult:
        return await self.check(
            conditions.VALUE_NOT_EQUALS, locator, unexpected_value, message, timeout
        )

    async def assert_input_value_matches(
        self,
        locator: Target,
        pattern: TextOrPattern,
        message: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> AssertionResult:
        return await self.check(conditions.VALUE_MATCHES, locator, pattern, message, timeout)

    async def assert_input_empty(
        self, locator: Target, message: Optional[str] = None, timeout: Optional[int] = None
    ) -> AssertionResult:
        return await self.check(conditions.VALUE_EQUALS, locator, "", message, timeout)

    async def assert_select_value(
        self,
        locator: Target,
        expected_value: str,
        message: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> AssertionResult:
        return await self.check(
            conditions.VALUE_EQUALS, locator, expected_value, message, timeout
        )

    # ------------------------------------------------------------------
    # Attributes, classes, CSS
    # ------------------------------------------------------------------

    async def assert_element_has_attribute(
        self,
        locator: Target,
        attribute_name: str,
        expected_value: Optional[TextOrPattern] = None,
        message: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> AssertionResult:
        """Presence only when *expected_value* is None; ``""`` means present and empty."""
        if expected_value is None:
            return await self.check(
                conditions.HAS_ATTRIBUTE, locator, None, message, timeout, arg=attribute_name
            )
        return await self.check(
            conditions.ATTRIBUTE_EQUALS,
            locator,
            expected_value,
            message,
            timeout,
            arg=attribute_name,
        )

    async def assert_element_not_has_attribute(
        self,
        locator: Target,
        attribute_name: str,
        message: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> AssertionResult:
        return await self.check(
            conditions.NOT_HAS_ATTRIBUTE, locator, None, message, timeout, arg=attribute_name
        )

    async def assert_placeholder_text(
        self,
        locator: Target,
        expected_placeholder: str,
        message: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> AssertionResult:
        return await self.assert_element_has_attribute(
            locator, "placeholder", expected_placeholder, message, timeout
        )

    async def assert_element_has_class(
        self,
        locator: Target,
        class_name: TextOrPattern,
        message: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> AssertionResult:
        return await self.check(conditions.HAS_CLASS, locator, class_name, message, timeout)

    async def assert_element_not_has_class(
        self,
        locator: Target,
        class_name: TextOrPattern,
        message: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> AssertionResult:
        return await self.check(conditions.NOT_HAS_CLASS, locator, class_name, message, timeout)

    async def assert_element_has_css(
        self,
        locator: Target,
        property_name: str,
        expected_value: TextOrPattern,
        message: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> AssertionResult:
        condition = self._pattern_aware(conditions.HAS_CSS, expected_value)
        return await self.check(
            condition, locator, expected_value, message, timeout, arg=property_name
        )

    # ------------------------------------------------------------------
    # Page level
    # ------------------------------------------------------------------

    async def assert_page_title(
        self,
        expected_title: TextOrPattern,
        message: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> AssertionResult:
        condition = self._pattern_aware(conditions.TITLE_MATCHES, expected_title)
        return await self.check(condition, None, expected_title, message, timeout)

    async def assert_url_contains(
        self,
        expected_url_part: str,
        message: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> AssertionResult:
        return await self.check(
            conditions.URL_CONTAINS, None, expected_url_part, message, timeout
        )

    async def assert_url(
        self,
        expected_url: TextOrPattern,
        message: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> AssertionResult:
        condition = self._pattern_aware(conditions.URL_MATCHES, expected_url)
        return await self.check(condition, None, expected_url, message, timeout)

    async def assert_url_not_contains(
        self,
        unexpected_url_part: str,
        message: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> AssertionResult:
        return await self.check(
            conditions.URL_NOT_CONTAINS, None, unexpected_url_part, message, timeout
        )

    # ------------------------------------------------------------------
    # Counts
    # ------------------------------------------------------------------

    async def assert_element_count(
        self,
        locator: Target,
        expected_count: int,
        message: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> AssertionResult:
        return await self.check(
            conditions.COUNT_EQUALS, locator, expected_count, message, timeout
        )

    async def assert_element_count_greater_than(
        self,
        locator: Target,
        min_count: int,
        message: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> AssertionResult:
        return await self.check(conditions.COUNT_ABOVE, locator, min_count, message, timeout)

    async def assert_element_count_less_than(
        self,
        locator: Target,
        max_count: int,
        message: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> AssertionResult:
        return await self.check(conditions.COUNT_BELOW, locator, max_count, message, timeout)

    # ------------------------------------------------------------------
    # Explicit timeouts
    # ------------------------------------------------------------------

    async def assert_element_appears_within_timeout(
        self, locator: Target, timeout: int = 30_000, message: Optional[str] = None
    ) -> AssertionResult:
        return await self.assert_element_visible(locator, message, timeout)

    async def assert_element_disappears_within_timeout(
        self, locator: Target, timeout: int = 30_000, message: Optional[str] = None
    ) -> AssertionResult:
        return await self.assert_element_hidden(locator, message, timeout)

    # ------------------------------------------------------------------
    # Composites: sequential folds, each sub-check with its own timeout
    # ------------------------------------------------------------------

    async def assert_multiple_elements_visible(
        self,
        locators: Sequence[Target],
        message: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> list[AssertionResult]:
        results = []
        for locator in locators:
            results.append(await self.assert_element_visible(locator, message, timeout))
        logger.debug("All %d element(s) visible", len(results))
        return results

    async def assert_element_contains_all_texts(
        self,
        locator: Target,
        expected_texts: Sequence[str],
        message: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> list[AssertionResult]:
        results = []
        for text in expected_texts:
            results.append(
                await self.assert_element_contains_text(locator, text, message, timeout)
            )
        return results

    async def assert_element_not_contain_any_texts(
        self,
        locator: Target,
        unexpected_texts: Sequence[str],
        message: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> list[AssertionResult]:
        results = []
        for text in unexpected_texts:
            results.append(
                await self.assert_element_not_contain_text(locator, text, message, timeout)
            )
        return results

    async def assert_validation_error(
        self,
        locator: Target,
        expected_error_message: str,
        message: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> list[AssertionResult]:
        return [
            await self.assert_element_visible(locator, message, timeout),
            await self.assert_element_contains_text(
                locator, expected_error_message, message, timeout
            ),
        ]

    async def assert_table_contains_data(
        self,
        table_locator: Target,
        row_index: int,
        column_index: int,
        expected_data: str,
        message: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> AssertionResult:
        """Row and column are 0-indexed."""
        table = self._resolver.resolve(table_locator)
        cell = self._resolver.table_cell(table, row_index, column_index)
        return await self.assert_element_contains_text(cell, expected_data, message, timeout)

    # ------------------------------------------------------------------
    # Screenshots (single attempt, diffing delegated)
    # ------------------------------------------------------------------

    async def assert_element_screenshot(
        self,
        locator: Target,
        screenshot_name: str,
        options: Optional[dict[str, Any]] = None,
        message: Optional[str] = None,
    ) -> AssertionResult:
        ref = self._resolver.resolve(locator)
        return await self._screenshots.assert_matches(
            self._resolver.locate(ref),
            screenshot_name,
            options,
            message,
            target_desc=self._resolver.describe(ref),
        )

    async def assert_page_screenshot(
        self,
        screenshot_name: str,
        options: Optional[dict[str, Any]] = None,
        message: Optional[str] = None,
    ) -> AssertionResult:
        return await self._screenshots.assert_matches(
            self._page, screenshot_name, options, message
        )

    async def take_screenshot(self, snapshot_name: str, full_page: bool = False) -> str:
        """Capture the page to ``<screenshot_dir>/<name>_<epoch ms>.png``."""
        directory = Path(self._config.screenshot_dir)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"{snapshot_name}_{int(time.time() * 1000)}.png"
        await self._page.screenshot(path=str(path), full_page=full_page)
        logger.debug("Screenshot saved: %s", path)
        return str(path)

    # ------------------------------------------------------------------
    # Dialogs (explicit event subscription)
    # ------------------------------------------------------------------

    def assert_alert_present(
        self,
        expected_text: Optional[str] = None,
        events: Any = None,
        message: Optional[str] = None,
    ) -> DialogExpectation:
        """Start listening for dialogs; call ``verify()`` (or use ``with``) later.

        *events* defaults to the page; pass another emitter to scope the
        subscription differently.
        """
        expectation = DialogExpectation(
            events if events is not None else self._page,
            expected_text,
            self._reporter,
            message,
        )
        return expectation.start()

    # ------------------------------------------------------------------
    # API responses (single attempt)
    # ------------------------------------------------------------------

    async def assert_response_status(
        self, response: Any, expected_status: int, message: Optional[str] = None
    ) -> AssertionResult:
        return self._responses.assert_status(response, expected_status, message)

    async def assert_response_contains(
        self, response: Any, expected_data: Any, message: Optional[str] = None
    ) -> AssertionResult:
        return await self._responses.assert_contains(response, expected_data, message)

    async def assert_response_header(
        self,
        response: Any,
        header_name: str,
        expected_value: str,
        message: Optional[str] = None,
    ) -> AssertionResult:
        return self._responses.assert_header(response, header_name, expected_value, message)
