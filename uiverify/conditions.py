"""
ConditionCatalog – Named predicates evaluated against a live target.

Each entry pairs an observer (one driver read) with a comparator mode.
Observers never cache: every polling attempt reads fresh state.

State conditions (visible, hidden, attached, detached, count) read a
missing target as a plain value. Value conditions (text, value,
attribute, class, css, enabled, checked, ...) first check the match
count and report "target not found" when nothing matches, which the
polling engine treats as not-yet-satisfied.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from uiverify.comparator import Comparator
from uiverify.errors import DriverError, TargetResolutionAmbiguous
from uiverify.models import ComparatorMode, Observation, TargetScope

logger = logging.getLogger(__name__)

ObserveFn = Callable[[Any, Any, int], Awaitable[Any]]

_STRICT_MODE_MARKER = "strict mode violation"
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class Condition:
    """A named, stateless predicate: observe via driver, compare via Comparator."""

    name: str
    observe: ObserveFn
    mode: ComparatorMode = ComparatorMode.EXACT
    subject: str = ""
    negate: bool = False
    scope: TargetScope = TargetScope.ELEMENT
    needs_element: bool = True
    missing_satisfies: bool = False
    # Boolean state conditions: (word when True, word when False)
    state_words: Optional[tuple[str, str]] = None
    expected_state: bool = True
    # Collapse whitespace in a string expected value, as the observer does
    normalize_expected: bool = False

    @property
    def is_state(self) -> bool:
        return self.state_words is not None

    def with_mode(self, mode: ComparatorMode) -> Condition:
        return replace(self, mode=mode)

    def validate(self, expected: Any) -> None:
        if not self.is_state:
            Comparator.validate(expected, self.mode)

    def prepare(self, expected: Any) -> Any:
        if self.normalize_expected and isinstance(expected, str):
            return _normalize(expected)
        return expected

    async def check(
        self,
        handle: Any,
        expected: Any = None,
        arg: Any = None,
        read_timeout_ms: int = 1_000,
    ) -> Observation:
        """One observation of *handle*. Never retries."""
        if self.is_state:
            expected = self.expected_state
        try:
            if self.needs_element and await handle.count() == 0:
                return Observation(satisfied=self.missing_satisfies, found=False)
            value = await self.observe(handle, arg, read_timeout_ms)
        except PlaywrightTimeoutError:
            # Element vanished between the count and the read.
            return Observation(satisfied=self.missing_satisfies, found=False)
        except PlaywrightError as e:
            if _STRICT_MODE_MARKER in e.message:
                raise TargetResolutionAmbiguous(e.message) from e
            raise DriverError(e.message) from e

        matched = Comparator.compare(value, self.prepare(expected), self.mode)
        return Observation(
            satisfied=matched != self.negate,
            found=True,
            observed_value=value,
        )

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def expectation(self, expected: Any = None, arg: Any = None) -> str:
        if self.is_state:
            return f"to be {self._word(self.expected_state)}"
        subject = self.subject.format(arg=arg)
        phrase = Comparator.expectation(expected, self.mode, self.negate)
        return f"{subject} {phrase}" if subject else phrase

    def describe_failure(
        self, observation: Observation, expected: Any = None, arg: Any = None
    ) -> str:
        if not observation.found:
            return f"expected {self.expectation(expected, arg)}, but the target was not found"
        if self.is_state:
            return (
                f"expected {self.expectation()}, "
                f"but was {self._word(bool(observation.observed_value))}"
            )
        subject = self.subject.format(arg=arg)
        detail = Comparator.describe(
            observation.observed_value, expected, self.mode, self.negate
        )
        return f"{subject} {detail}" if subject else detail

    def _word(self, value: bool) -> str:
        assert self.state_words is not None
        return self.state_words[0] if value else self.state_words[1]


# ------------------------------------------------------------------
# Observers (one driver read each)
# ------------------------------------------------------------------


def _normalize(text: Optional[str]) -> str:
    return _WHITESPACE_RE.sub(" ", text or "").strip()


async def _visible(handle: Any, arg: Any, timeout: int) -> bool:
    return await handle.is_visible()


async def _hidden(handle: Any, arg: Any, timeout: int) -> bool:
    return await handle.is_hidden()


async def _attached(handle: Any, arg: Any, timeout: int) -> bool:
    return await handle.count() > 0


async def _enabled(handle: Any, arg: Any, timeout: int) -> bool:
    return await handle.is_enabled(timeout=timeout)


async def _checked(handle: Any, arg: Any, timeout: int) -> bool:
    return await handle.is_checked(timeout=timeout)


async def _editable(handle: Any, arg: Any, timeout: int) -> bool:
    return await handle.is_editable(timeout=timeout)


async def _focused(handle: Any, arg: Any, timeout: int) -> bool:
    return await handle.evaluate(
        "el => el === document.activeElement", timeout=timeout
    )


async def _text(handle: Any, arg: Any, timeout: int) -> str:
    return _normalize(await handle.text_content(timeout=timeout))


async def _input_value(handle: Any, arg: Any, timeout: int) -> str:
    return await handle.input_value(timeout=timeout)


async def _attribute(handle: Any, arg: Any, timeout: int) -> Optional[str]:
    return await handle.get_attribute(arg, timeout=timeout)


async def _class_attribute(handle: Any, arg: Any, timeout: int) -> str:
    return await handle.get_attribute("class", timeout=timeout) or ""


async def _css(handle: Any, arg: Any, timeout: int) -> str:
    return await handle.evaluate(
        "(el, name) => window.getComputedStyle(el).getPropertyValue(name)",
        arg,
        timeout=timeout,
    )


async def _count(handle: Any, arg: Any, timeout: int) -> int:
    return await handle.count()


async def _title(handle: Any, arg: Any, timeout: int) -> str:
    return _normalize(await handle.title())


async def _url(handle: Any, arg: Any, timeout: int) -> str:
    return handle.url


# ------------------------------------------------------------------
# Catalog
# ------------------------------------------------------------------

CATALOG: dict[str, Condition] = {}


def _register(condition: Condition) -> Condition:
    CATALOG[condition.name] = condition
    return condition


def get_condition(name: str) -> Condition:
    try:
        return CATALOG[name]
    except KeyError:
        raise KeyError(
            f"Unknown condition {name!r}; known: {', '.join(sorted(CATALOG))}"
        ) from None


# Element state
VISIBLE = _register(Condition(
    "visible", _visible, needs_element=False, state_words=("visible", "not visible"),
))
HIDDEN = _register(Condition(
    "hidden", _hidden, needs_element=False, state_words=("hidden", "visible"),
))
ATTACHED = _register(Condition(
    "attached", _attached, needs_element=False, state_words=("attached", "detached"),
))
DETACHED = _register(Condition(
    "detached", _attached, needs_element=False,
    state_words=("attached", "detached"), expected_state=False,
))
ENABLED = _register(Condition(
    "enabled", _enabled, state_words=("enabled", "disabled"),
))
DISABLED = _register(Condition(
    "disabled", _enabled, state_words=("enabled", "disabled"), expected_state=False,
))
CHECKED = _register(Condition(
    "checked", _checked, state_words=("checked", "unchecked"),
))
UNCHECKED = _register(Condition(
    "unchecked", _checked, state_words=("checked", "unchecked"), expected_state=False,
))
FOCUSED = _register(Condition(
    "focused", _focused, state_words=("focused", "not focused"),
))
EDITABLE = _register(Condition(
    "editable", _editable, state_words=("editable", "not editable"),
))

# Text content
HAS_TEXT = _register(Condition(
    "has_text", _text, subject="text", normalize_expected=True,
))
CONTAINS_TEXT = _register(Condition(
    "contains_text", _text, ComparatorMode.CONTAINS, subject="text",
    normalize_expected=True,
))
NOT_CONTAINS_TEXT = _register(Condition(
    "not_contains_text", _text, ComparatorMode.CONTAINS, subject="text", negate=True,
    normalize_expected=True,
))
TEXT_MATCHES = _register(Condition(
    "text_matches", _text, ComparatorMode.REGEX, subject="text",
))

# Input value
VALUE_EQUALS = _register(Condition("value_equals", _input_value, subject="input value"))
VALUE_NOT_EQUALS = _register(Condition(
    "value_not_equals", _input_value, subject="input value", negate=True,
))
VALUE_MATCHES = _register(Condition(
    "value_matches", _input_value, ComparatorMode.REGEX, subject="input value",
))

# Attributes / classes / css
HAS_ATTRIBUTE = _register(Condition(
    "has_attribute", _attribute, ComparatorMode.ATTRIBUTE_EXISTS, subject="attribute {arg!r}",
))
ATTRIBUTE_EQUALS = _register(Condition(
    "attribute_equals", _attribute, ComparatorMode.ATTRIBUTE_EQUALS,
    subject="attribute {arg!r}",
))
NOT_HAS_ATTRIBUTE = _register(Condition(
    "not_has_attribute", _attribute, ComparatorMode.ATTRIBUTE_EXISTS,
    subject="attribute {arg!r}", negate=True,
))
HAS_CLASS = _register(Condition(
    "has_class", _class_attribute, ComparatorMode.REGEX, subject="class",
))
NOT_HAS_CLASS = _register(Condition(
    "not_has_class", _class_attribute, ComparatorMode.REGEX, subject="class", negate=True,
))
HAS_CSS = _register(Condition("has_css", _css, subject="CSS {arg!r}"))

# Counts
COUNT_EQUALS = _register(Condition(
    "count_equals", _count, needs_element=False, subject="count",
))
COUNT_ABOVE = _register(Condition(
    "count_above", _count, ComparatorMode.GREATER_THAN, needs_element=False, subject="count",
))
COUNT_BELOW = _register(Condition(
    "count_below", _count, ComparatorMode.LESS_THAN, needs_element=False, subject="count",
))

# Page level
TITLE_MATCHES = _register(Condition(
    "title_matches", _title, scope=TargetScope.PAGE, needs_element=False, subject="title",
    normalize_expected=True,
))
URL_MATCHES = _register(Condition(
    "url_matches", _url, scope=TargetScope.PAGE, needs_element=False, subject="URL",
))
URL_CONTAINS = _register(Condition(
    "url_contains", _url, ComparatorMode.REGEX, scope=TargetScope.PAGE,
    needs_element=False, subject="URL",
))
URL_NOT_CONTAINS = _register(Condition(
    "url_not_contains", _url, ComparatorMode.REGEX, scope=TargetScope.PAGE,
    needs_element=False, subject="URL", negate=True,
))
