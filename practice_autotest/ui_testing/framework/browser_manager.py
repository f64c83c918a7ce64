"""
================================================================================
Browser Manager
================================================================================

Launches and tears down the Playwright browser used by the UI suites.

One browser per session, one isolated context per test. A context is the
browsing context a page-object family operates on; it is never shared
between tests.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from loguru import logger
from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Playwright,
)

from practice_autotest.common.config_loader import ConfigLoader


SUPPORTED_BROWSERS = ("chromium", "firefox", "webkit")


class BrowserManager:
    """
    Manages the browser instance and its contexts.

    Usage:
        async with BrowserManager() as manager:
            context = await manager.new_context()
            page = await context.new_page()
            await page.goto("https://practicetestautomation.com/practice-test-login/")
    """

    DEFAULT_LAUNCH_OPTIONS: Dict[str, Any] = {
        "headless": True,
        "args": ["--ignore-certificate-errors"],
    }

    DEFAULT_VIEWPORT: Dict[str, int] = {"width": 1280, "height": 800}

    def __init__(
        self,
        headless: Optional[bool] = None,
        browser_type: Optional[str] = None,
        config: Optional[ConfigLoader] = None,
    ):
        """
        Args:
            headless: Run browser in headless mode (defaults to `ui.headless`)
            browser_type: 'chromium', 'firefox' or 'webkit' (defaults to `ui.browser`)
            config: Configuration source
        """
        config = config if config is not None else ConfigLoader()
        self.headless = headless if headless is not None else bool(config.get("ui.headless", True))
        self.browser_type = browser_type or config.get("ui.browser", "chromium")
        self.viewport = {
            "width": int(config.get("ui.viewport.width", self.DEFAULT_VIEWPORT["width"])),
            "height": int(config.get("ui.viewport.height", self.DEFAULT_VIEWPORT["height"])),
        }
        if self.browser_type not in SUPPORTED_BROWSERS:
            raise ValueError(
                f"Unsupported browser '{self.browser_type}', expected one of {SUPPORTED_BROWSERS}"
            )

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._contexts: List[BrowserContext] = []

    async def __aenter__(self) -> "BrowserManager":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def start(self) -> Browser:
        """Start Playwright and launch the browser."""
        if self._browser is not None:
            return self._browser

        self._playwright = await async_playwright().start()
        launcher = getattr(self._playwright, self.browser_type)
        launch_options = {**self.DEFAULT_LAUNCH_OPTIONS, "headless": self.headless}

        try:
            self._browser = await launcher.launch(**launch_options)
        except Exception:
            await self._playwright.stop()
            self._playwright = None
            raise

        logger.debug(f"Browser started: {self.browser_type} (headless={self.headless})")
        return self._browser

    async def close(self) -> None:
        """
        Close all contexts, the browser and Playwright.

        The browser and Playwright are shut down even when closing a
        context fails; that error is re-raised afterwards.
        """
        contexts, self._contexts = self._contexts, []
        try:
            for context in contexts:
                await context.close()
        finally:
            try:
                if self._browser:
                    await self._browser.close()
                    self._browser = None
            finally:
                if self._playwright:
                    await self._playwright.stop()
                    self._playwright = None

        logger.debug(f"Browser {self.browser_type} shut down")

    async def new_context(self, **options: Any) -> BrowserContext:
        """
        Create a new isolated browser context (own cookies, storage).

        Raises:
            RuntimeError: Browser not started
        """
        if not self._browser:
            raise RuntimeError("BrowserManager.start() has not been called")

        context = await self._browser.new_context(
            **{"viewport": self.viewport, "ignore_https_errors": True, **options}
        )
        self._contexts.append(context)
        return context

    async def release_context(self, context: BrowserContext) -> None:
        """Close a context created by new_context()."""
        if context in self._contexts:
            self._contexts.remove(context)
        await context.close()

    async def new_page(self, context: Optional[BrowserContext] = None, **context_options: Any) -> Page:
        """Create a page in `context`, or in a new context when omitted."""
        if context is None:
            context = await self.new_context(**context_options)
        return await context.new_page()


__all__ = [
    "BrowserManager",
    "SUPPORTED_BROWSERS",
]
