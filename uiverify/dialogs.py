"""
DialogExpectation – Explicit subscription to dialog events.

The event source is injected (a Playwright Page or anything exposing
``on`` / ``remove_listener``), so the caller decides when listening starts
and stops. Dialogs arrive independently of any polling loop; each one is
recorded, checked and accepted. ``verify()`` turns what was seen into a
pass/fail result.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from uiverify.models import AssertionResult
from uiverify.reporter import AssertionReporter

logger = logging.getLogger(__name__)

_DIALOG_EVENT = "dialog"


class DialogExpectation:
    def __init__(
        self,
        events: Any,
        expected_text: Optional[str] = None,
        reporter: Optional[AssertionReporter] = None,
        message: Optional[str] = None,
    ) -> None:
        self._events = events
        self._expected_text = expected_text
        self._reporter = reporter or AssertionReporter()
        self._message = message
        self._subscribed = False
        self.messages: list[str] = []
        self.mismatches: list[str] = []

    # ------------------------------------------------------------------
    # Subscription lifetime
    # ------------------------------------------------------------------

    def start(self) -> DialogExpectation:
        if not self._subscribed:
            self._events.on(_DIALOG_EVENT, self._handle_dialog)
            self._subscribed = True
        return self

    def stop(self) -> None:
        if self._subscribed:
            self._events.remove_listener(_DIALOG_EVENT, self._handle_dialog)
            self._subscribed = False

    def __enter__(self) -> DialogExpectation:
        return self.start()

    def __exit__(self, *exc_info: Any) -> None:
        self.stop()

    # ------------------------------------------------------------------
    # Handler
    # ------------------------------------------------------------------

    async def _handle_dialog(self, dialog: Any) -> None:
        text = dialog.message
        self.messages.append(text)
        if self._expected_text and self._expected_text not in text:
            self.mismatches.append(text)
        logger.debug("Dialog (%s) received: %s", dialog.type, text)
        await dialog.accept()

    # ------------------------------------------------------------------
    # Verdict
    # ------------------------------------------------------------------

    def verify(self) -> AssertionResult:
        if not self.messages:
            default = "Expected a dialog to be shown, but none appeared"
        elif self.mismatches:
            default = (
                f"Expected dialog text to contain {self._expected_text!r}, "
                f"but got {self.mismatches[0]!r}"
            )
        else:
            default = ""

        result = AssertionResult(
            passed=not default,
            expected_value=self._expected_text,
            observed_value=list(self.messages),
            condition="alert_present",
            attempts=len(self.messages),
        )
        if default:
            result.message = self._reporter.compose(default, self._message)
        return self._reporter.report(result, polled=False)
