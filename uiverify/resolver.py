"""
LocatorResolver – Turns caller-supplied targets into TargetRefs.

Callers may pass a raw selector string, an already-built TargetRef or a
Playwright Locator interchangeably. Resolution is lazy: strings become
SelectorRefs and are only looked up against the page when the polling
engine observes them, so DOM changes between attempts are always seen.
"""

from __future__ import annotations

import logging
from typing import Any, Union

from playwright.async_api import Page

from uiverify.models import HandleRef, SelectorRef, TargetRef

logger = logging.getLogger(__name__)

# 1-indexed in CSS, 0-indexed for callers.
_TABLE_CELL_SELECTOR = "tr:nth-child({row}) td:nth-child({column})"


class LocatorResolver:
    """Resolves targets against a page without touching the DOM."""

    def __init__(self, page: Page) -> None:
        self._page = page

    @property
    def page(self) -> Page:
        return self._page

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve(self, target: Union[str, TargetRef, Any]) -> TargetRef:
        """Wrap a selector string; pass TargetRefs through unchanged."""
        if isinstance(target, (SelectorRef, HandleRef)):
            return target
        if isinstance(target, str):
            return SelectorRef(target)
        return HandleRef(target)

    def page_ref(self) -> TargetRef:
        return HandleRef(self._page)

    def locate(self, ref: TargetRef) -> Any:
        """Return a live driver handle for *ref*.

        Called once per observation; selector targets get a fresh
        ``page.locator`` every time.
        """
        match ref:
            case SelectorRef(selector=selector, parent=None):
                return self._page.locator(selector)
            case SelectorRef(selector=selector, parent=parent):
                return self.locate(parent).locator(selector)
            case HandleRef(handle=handle):
                return handle
        raise TypeError(f"Not a target reference: {ref!r}")

    def derive(self, ref: TargetRef, sub_selector: str) -> TargetRef:
        """Lazy child target scoped to *ref*."""
        return SelectorRef(sub_selector, parent=ref)

    def table_cell(self, ref: TargetRef, row: int, column: int) -> TargetRef:
        """Cell target for 0-indexed *row* / *column* inside a table."""
        selector = _TABLE_CELL_SELECTOR.format(row=row + 1, column=column + 1)
        logger.debug("Table cell (%d, %d) -> %s", row, column, selector)
        return self.derive(ref, selector)

    @staticmethod
    def describe(ref: TargetRef) -> str:
        match ref:
            case SelectorRef(selector=selector, parent=None):
                return f"'{selector}'"
            case SelectorRef(selector=selector, parent=parent):
                return f"{LocatorResolver.describe(parent)} >> '{selector}'"
            case HandleRef(handle=handle):
                return repr(handle)
        return repr(ref)
