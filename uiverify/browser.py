"""
BrowserManager – Launches and manages the Playwright browser for the CLI.

The verification core never owns a browser. The command line opens one
page per check inside ``async with BrowserManager(config) as browser``;
leaving the block always shuts the browser down, even when navigation
or the check itself fails.
"""

from __future__ import annotations

import logging
from typing import Optional

from playwright.async_api import (
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    Playwright,
    async_playwright,
)

from uiverify.errors import DriverError
from uiverify.models import VerifierConfig

logger = logging.getLogger(__name__)


class BrowserManager:
    """Manages the Playwright browser lifecycle."""

    def __init__(self, config: VerifierConfig) -> None:
        self._config = config
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    async def __aenter__(self) -> BrowserManager:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def launch(self, url: str = "") -> Page:
        """Launch the browser and return the main page.

        Navigation failures surface as DriverError; the caller still owns
        cleanup via close() or the ``async with`` block.
        """
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(
            headless=self._config.headless,
        )
        self._context = await self._browser.new_context()
        self._page = await self._context.new_page()

        if url:
            try:
                await self._page.goto(url, wait_until="domcontentloaded")
            except PlaywrightError as e:
                raise DriverError(f"Could not open {url}: {e.message}") from e

        logger.info("Browser launched (headless=%s)", self._config.headless)
        return self._page

    async def close(self) -> None:
        """Gracefully shut down browser and Playwright."""
        if self._browser:
            await self._browser.close()
        if self._playwright:
            await self._playwright.stop()
        self._page = self._context = self._browser = self._playwright = None
        logger.info("Browser closed")

    @property
    def page(self) -> Page:
        assert self._page is not None, "Browser not launched yet"
        return self._page
