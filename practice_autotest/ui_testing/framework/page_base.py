"""
================================================================================
Base Page Object
================================================================================

Foundation class for Page Object Model implementation.

Provides:
    - Navigation and page-load waits
    - Element waits and interactions on lazily-resolved ElementRefs
    - Non-fatal queries (is_* / get_*) and fail-fast assertions (assert_*)
    - Probes that turn a timeout into a boolean
    - Screenshot and failure-capture utilities

Every wait is bounded; a timeout of 0 or less is rejected instead of being
passed to Playwright (where 0 means "wait forever").

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Awaitable, Dict, List, Optional

import allure
from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, Response, expect
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from practice_autotest.common.config_loader import ConfigLoader

from .element_ref import ElementRef
from .exceptions import (
    AssertionFailure,
    ElementNotFoundError,
    InteractionError,
    NavigationError,
    WaitTimeoutError,
)
from .probe import ProbeResult, probe


DEFAULT_BASE_URL = "https://practicetestautomation.com"

# Default output directory for screenshots
SCREENSHOT_DIR = Path(__file__).parent.parent / "screenshots"

# Number of recent /api/ responses kept for failure reports
MAX_CAPTURED_RESPONSES = 20


def _first_line(error: BaseException) -> str:
    text = str(error).strip()
    return text.splitlines()[0] if text else error.__class__.__name__


def _bounded(timeout: Optional[int], default: int) -> int:
    """Resolve an optional timeout (ms) and reject unbounded values."""
    value = default if timeout is None else int(timeout)
    if value <= 0:
        raise ValueError(f"Timeout must be a positive number of milliseconds, got {value}")
    return value


@dataclass(frozen=True)
class PageTimeouts:
    """Default timeouts in milliseconds."""
    page_load: int = 30000
    element: int = 10000
    action: int = 10000
    visibility: int = 2000
    assertion: int = 5000

    @classmethod
    def from_config(cls, config: Any) -> "PageTimeouts":
        defaults = cls()
        return cls(
            page_load=int(config.get("ui.timeouts.page_load", defaults.page_load)),
            element=int(config.get("ui.timeouts.element", defaults.element)),
            action=int(config.get("ui.timeouts.action", defaults.action)),
            visibility=int(config.get("ui.timeouts.visibility", defaults.visibility)),
            assertion=int(config.get("ui.timeouts.assertion", defaults.assertion)),
        )


class BasePage:
    """
    Base class for all page objects.

    Operations fall into two families:
        - assert_*: fail the test with the caller's message (AssertionFailure)
        - is_* / probe: report a timeout as False and never fail the test

    Usage:
        class LoginPage(BasePage):
            URL_PATH = "/practice-test-login/"
            USERNAME = ElementRef("username_input", "#username")

            async def enter_username(self, value: str) -> None:
                await self.wait_for_element(self.USERNAME)
                await self.fill_input(self.USERNAME, value)
    """

    # Override in subclasses
    URL_PATH: str = "/"

    def __init__(
        self,
        page: Page,
        base_url: str = "",
        config: Optional[Any] = None,
    ):
        """
        Initialize page object.

        Nothing on the page is queried here, so a page object can be built
        before the page is ready.

        Args:
            page: Playwright Page object
            base_url: Base URL for the application (defaults to `ui.base_url`)
            config: Configuration source (defaults to the ConfigLoader singleton)
        """
        config = config if config is not None else ConfigLoader()
        self.page = page
        if not base_url:
            base_url = config.get("ui.base_url", DEFAULT_BASE_URL)
        self.base_url = base_url.rstrip("/")
        self.timeouts = PageTimeouts.from_config(config)
        self.navigation_wait_until: str = config.get("ui.navigation_wait_until", "load")

        self._captured_responses: List[Dict[str, Any]] = []
        self._setup_response_capture()

    def _setup_response_capture(self) -> None:
        """Keep the most recent /api/ responses for failure reports."""

        async def capture_response(response: Response) -> None:
            if "/api/" not in response.url:
                return
            try:
                body = await response.text()
            except PlaywrightError:
                body = "<unable to read>"

            self._captured_responses.append({
                "timestamp": datetime.now().isoformat(),
                "url": response.url,
                "status": response.status,
                "body": body[:1000],
            })
            if len(self._captured_responses) > MAX_CAPTURED_RESPONSES:
                self._captured_responses.pop(0)

        self.page.on("response", capture_response)

    @property
    def url(self) -> str:
        """Full URL of this page."""
        return self.build_url(self.URL_PATH)

    @property
    def current_url(self) -> str:
        """URL the browsing context currently shows."""
        return self.page.url

    def build_url(self, path: str) -> str:
        """Absolute URLs pass through; relative paths are joined to base_url."""
        if "://" in path:
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    # =========================================================================
    # Navigation
    # =========================================================================

    async def navigate_to(self, path: str, wait_for: Optional[str] = None) -> None:
        """
        Navigate to an absolute URL or a path relative to base_url.

        Args:
            path: URL or path
            wait_for: Playwright wait condition - 'load', 'domcontentloaded',
                'networkidle', 'commit' (defaults to `ui.navigation_wait_until`)

        Raises:
            NavigationError: Target unreachable within the page-load timeout
        """
        target = self.build_url(path)
        with allure.step(f"Navigate to {path}"):
            try:
                await self.page.goto(
                    target,
                    wait_until=wait_for or self.navigation_wait_until,
                    timeout=self.timeouts.page_load,
                )
            except PlaywrightError as e:
                logger.error(f"Navigation to {target} failed: {_first_line(e)}")
                raise NavigationError(f"Could not navigate to {target}: {_first_line(e)}") from e
            logger.debug(f"Navigated to: {target}")

    async def navigate(self, wait_for: Optional[str] = None) -> None:
        """Navigate to this page's URL_PATH."""
        await self.navigate_to(self.URL_PATH, wait_for=wait_for)

    async def wait_for_page_load(self, state: str = "load", timeout: Optional[int] = None) -> None:
        """
        Wait for the page to reach a stable load state.

        Args:
            state: Playwright load state ('load', 'domcontentloaded', 'networkidle')
            timeout: Timeout in milliseconds (defaults to the page-load ceiling)

        Raises:
            WaitTimeoutError: Load state not reached in time
        """
        timeout = _bounded(timeout, self.timeouts.page_load)
        try:
            await self.page.wait_for_load_state(state, timeout=timeout)
        except PlaywrightTimeoutError as e:
            raise WaitTimeoutError(
                f"Page did not reach '{state}' within {timeout} ms ({self.page.url})"
            ) from e

    # =========================================================================
    # Element waits and interactions
    # =========================================================================

    async def wait_for_element(self, ref: ElementRef, timeout: Optional[int] = None) -> None:
        """
        Wait until the element is attached and visible.

        Raises:
            ElementNotFoundError: Element not visible before the timeout
        """
        timeout = _bounded(timeout, self.timeouts.element)
        locator = ref.resolve(self.page)
        try:
            await locator.wait_for(state="visible", timeout=timeout)
        except PlaywrightTimeoutError as e:
            logger.warning(f"Element '{ref.name}' not visible after {timeout} ms")
            raise ElementNotFoundError(
                f"Element {ref} was not visible within {timeout} ms"
            ) from e
        logger.debug(f"Element '{ref.name}' visible")

    async def fill_input(self, ref: ElementRef, value: str) -> None:
        """
        Set the text value of an input element.

        Callers wait for the element first (see wait_for_element).

        Raises:
            InteractionError: Element not editable
        """
        locator = ref.resolve(self.page)
        with allure.step(f"Fill {ref.name}: {ref.mask(value)}"):
            try:
                await locator.fill(value, timeout=self.timeouts.action)
            except PlaywrightError as e:
                raise InteractionError(f"Cannot fill {ref}: {_first_line(e)}") from e
        logger.debug(f"Filled '{ref.name}' with '{ref.mask(value)}'")

    async def click_element(self, ref: ElementRef) -> None:
        """
        Click an element.

        Raises:
            InteractionError: Element covered, disabled or detached
        """
        locator = ref.resolve(self.page)
        with allure.step(f"Click: {ref.name}"):
            try:
                await locator.click(timeout=self.timeouts.action)
            except PlaywrightError as e:
                raise InteractionError(f"Cannot click {ref}: {_first_line(e)}") from e
        logger.debug(f"Clicked '{ref.name}'")

    # =========================================================================
    # Non-fatal queries
    # =========================================================================

    async def get_element_text(self, ref: ElementRef, timeout: Optional[int] = None) -> str:
        """
        Get the visible text of an element.

        Returns:
            Stripped text, "" when the element has no text

        Raises:
            ElementNotFoundError: Element never attached
        """
        timeout = _bounded(timeout, self.timeouts.element)
        locator = ref.resolve(self.page)
        try:
            text = await locator.inner_text(timeout=timeout)
        except PlaywrightTimeoutError as e:
            raise ElementNotFoundError(
                f"Element {ref} was not attached within {timeout} ms"
            ) from e
        return (text or "").strip()

    async def is_element_visible(self, ref: ElementRef, timeout: Optional[int] = None) -> bool:
        """
        Check if element is visible.

        Args:
            ref: Element reference
            timeout: Time to wait for visibility in ms. 0 checks once without waiting.

        Returns:
            True if visible, False otherwise. Driver failures other than a
            timeout still raise.
        """
        locator = ref.resolve(self.page)
        if timeout == 0:
            return await locator.is_visible()
        timeout = _bounded(timeout, self.timeouts.visibility)
        result = await probe(
            locator.wait_for(state="visible", timeout=timeout),
            description=f"{ref.name} visible",
        )
        return result.ok

    async def probe(self, awaitable: Awaitable[object], description: str = "probe") -> ProbeResult:
        """Await a bounded wait and report a timeout as ProbeResult(ok=False)."""
        return await probe(awaitable, description=description)

    # =========================================================================
    # Fail-fast assertions
    # =========================================================================

    async def assert_element_visible(
        self,
        ref: ElementRef,
        message: str,
        timeout: Optional[int] = None,
    ) -> None:
        """
        Fail with `message` unless the element becomes visible in time.

        Raises:
            AssertionFailure: carrying `message`
        """
        timeout = _bounded(timeout, self.timeouts.assertion)
        locator = ref.resolve(self.page)
        with allure.step(f"Assert visible: {ref.name}"):
            try:
                await expect(locator).to_be_visible(timeout=timeout)
            except AssertionError as e:
                logger.error(f"Assertion failed: {message}")
                raise AssertionFailure(message, detail=_first_line(e)) from e

    async def assert_element_contains_text(
        self,
        ref: ElementRef,
        expected_substring: str,
        message: str,
        ignore_case: bool = False,
        timeout: Optional[int] = None,
    ) -> None:
        """
        Fail with `message` unless the element text contains `expected_substring`.

        Substring match, case-sensitive unless `ignore_case` is set.

        Raises:
            AssertionFailure: carrying `message`
        """
        timeout = _bounded(timeout, self.timeouts.assertion)
        locator = ref.resolve(self.page)
        with allure.step(f"Assert '{ref.name}' contains '{expected_substring}'"):
            try:
                await expect(locator).to_contain_text(
                    expected_substring, ignore_case=ignore_case, timeout=timeout
                )
            except AssertionError as e:
                logger.error(f"Assertion failed: {message}")
                raise AssertionFailure(message, detail=_first_line(e)) from e

    async def assert_url_contains(
        self,
        expected_substring: str,
        message: str,
        timeout: Optional[int] = None,
    ) -> None:
        """
        Fail with `message` unless the current URL contains `expected_substring`.

        Trailing slashes and query strings around the fragment do not matter.

        Raises:
            AssertionFailure: carrying `message`
        """
        timeout = _bounded(timeout, self.timeouts.assertion)
        with allure.step(f"Assert URL contains '{expected_substring}'"):
            try:
                await expect(self.page).to_have_url(
                    re.compile(re.escape(expected_substring)), timeout=timeout
                )
            except AssertionError as e:
                logger.error(f"Assertion failed: {message} (url: {self.page.url})")
                raise AssertionFailure(message, detail=_first_line(e)) from e

    async def assert_all(self, *checks: Awaitable[None]) -> None:
        """
        Await every assertion, then fail once with all collected messages.

        Only AssertionFailure is collected; any other error propagates
        immediately and the remaining checks are discarded.
        """
        failures: List[str] = []
        pending = list(checks)
        try:
            while pending:
                check = pending.pop(0)
                try:
                    await check
                except AssertionFailure as e:
                    failures.append(e.message)
        finally:
            for leftover in pending:
                close = getattr(leftover, "close", None)
                if close is not None:
                    close()
        if failures:
            raise AssertionFailure("; ".join(failures))

    # =========================================================================
    # Wait Utilities
    # =========================================================================

    async def wait_for_url_to_contain(self, expected_substring: str, timeout_ms: int) -> None:
        """
        Wait until the URL contains `expected_substring`.

        Args:
            expected_substring: Fragment expected in the URL
            timeout_ms: Upper bound in milliseconds

        Raises:
            WaitTimeoutError: Fragment not seen before the timeout
        """
        timeout_ms = _bounded(timeout_ms, self.timeouts.page_load)
        try:
            await self.page.wait_for_url(
                lambda url: expected_substring in url, timeout=timeout_ms
            )
        except PlaywrightTimeoutError as e:
            raise WaitTimeoutError(
                f"URL did not contain '{expected_substring}' within {timeout_ms} ms "
                f"(current: {self.page.url})"
            ) from e

    # =========================================================================
    # Screenshot and Debug Utilities
    # =========================================================================

    async def screenshot(
        self,
        name: str,
        full_page: bool = False,
        attach_to_allure: bool = True,
    ) -> Path:
        """
        Take screenshot and optionally attach to Allure.

        Returns:
            Path to saved screenshot
        """
        SCREENSHOT_DIR.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = SCREENSHOT_DIR / f"{name}_{timestamp}.png"

        await self.page.screenshot(path=str(filepath), full_page=full_page)

        if attach_to_allure:
            allure.attach.file(
                str(filepath),
                name=name,
                attachment_type=allure.attachment_type.PNG,
            )

        logger.debug(f"Screenshot saved: {filepath}")
        return filepath

    async def capture_failure(self, test_name: str) -> None:
        """
        Attach debugging information for a failed test.

        Saves:
            - Screenshot
            - Current URL
            - Recent /api/ responses
        """
        with allure.step("Capture failure details"):
            await self.screenshot(f"failure_{test_name}", full_page=True)

            allure.attach(
                self.page.url,
                name="Current URL",
                attachment_type=allure.attachment_type.TEXT,
            )

            if self._captured_responses:
                allure.attach(
                    json.dumps(self._captured_responses[-10:], indent=2),
                    name="Recent API Responses",
                    attachment_type=allure.attachment_type.JSON,
                )


__all__ = [
    "BasePage",
    "PageTimeouts",
    "DEFAULT_BASE_URL",
]
