"""
In-memory stand-ins for the parts of the Playwright async API that BasePage
uses, so the page-object contract can be tested without a browser.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError


class DummyConfig:
    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self.data = data or {}

    def get(self, key, default=None):
        return self.data.get(key, default)


@dataclass
class FakeElement:
    visible: bool = True
    text: str = ""
    editable: bool = True
    clickable: bool = True
    value: str = ""
    on_click: Optional[Callable[[], None]] = None


class FakePage:
    def __init__(self, url: str = "about:blank"):
        self.url = url
        self.elements: Dict[str, FakeElement] = {}
        self.actions: List[Tuple[str, str]] = []
        self.handlers: List[Tuple[str, Any]] = []
        self.locator_calls = 0
        self.goto_error: Optional[BaseException] = None
        self.load_error: Optional[BaseException] = None
        self.url_error: Optional[BaseException] = None
        self.wait_error: Optional[BaseException] = None
        self.routes: Dict[str, Callable[["FakePage"], None]] = {}

    def add(self, selector: str, **kwargs: Any) -> FakeElement:
        element = FakeElement(**kwargs)
        self.elements[selector] = element
        return element

    def on(self, event: str, handler: Any) -> None:
        self.handlers.append((event, handler))

    def locator(self, selector: str) -> "FakeLocator":
        self.locator_calls += 1
        return FakeLocator(self, (selector,))

    async def goto(self, url: str, wait_until: str = "load", timeout: Optional[int] = None) -> None:
        self.actions.append(("goto", url))
        if self.goto_error:
            raise self.goto_error
        self.url = url
        for fragment, build in self.routes.items():
            if fragment in url:
                build(self)

    async def wait_for_load_state(self, state: str = "load", timeout: Optional[int] = None) -> None:
        self.actions.append(("load_state", state))
        if self.load_error:
            raise self.load_error

    async def wait_for_url(self, url: Callable[[str], bool], timeout: Optional[int] = None) -> None:
        self.actions.append(("wait_for_url", str(timeout)))
        if self.url_error:
            raise self.url_error
        if not url(self.url):
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded.")

    async def screenshot(self, path: str, full_page: bool = False) -> bytes:
        return b""


class FakeLocator:
    def __init__(self, page: FakePage, selectors: Tuple[str, ...]):
        self.page = page
        self.selectors = selectors

    def or_(self, other: "FakeLocator") -> "FakeLocator":
        return FakeLocator(self.page, self.selectors + other.selectors)

    @property
    def first(self) -> "FakeLocator":
        return self

    @property
    def name(self) -> str:
        return self.selectors[0]

    def _element(self) -> Optional[FakeElement]:
        for selector in self.selectors:
            if selector in self.page.elements:
                return self.page.elements[selector]
        return None

    async def wait_for(self, state: str = "visible", timeout: Optional[int] = None) -> None:
        self.page.actions.append(("wait", self.name))
        if self.page.wait_error:
            raise self.page.wait_error
        element = self._element()
        if element is None or not element.visible:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {self.name}")

    async def fill(self, value: str, timeout: Optional[int] = None) -> None:
        self.page.actions.append(("fill", self.name))
        element = self._element()
        if element is None or not element.editable:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded: element is not editable")
        element.value = value

    async def click(self, timeout: Optional[int] = None) -> None:
        self.page.actions.append(("click", self.name))
        element = self._element()
        if element is None:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded")
        if not element.clickable:
            raise PlaywrightError("Element is not enabled")
        if element.on_click:
            element.on_click()

    async def inner_text(self, timeout: Optional[int] = None) -> str:
        element = self._element()
        if element is None:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded")
        return element.text

    async def is_visible(self) -> bool:
        if self.page.wait_error:
            raise self.page.wait_error
        element = self._element()
        return element is not None and element.visible


class FakeAssertions:
    """Mirror of the expect() matchers BasePage uses, without retrying."""

    def __init__(self, target: Any):
        self.target = target

    async def to_be_visible(self, timeout: Optional[int] = None) -> None:
        if not await self.target.is_visible():
            raise AssertionError("Locator expected to be visible\nActual value: hidden")

    async def to_contain_text(self, expected: str, ignore_case: bool = False, timeout: Optional[int] = None) -> None:
        element = self.target._element()
        actual = element.text if element else ""
        if ignore_case:
            found = expected.lower() in actual.lower()
        else:
            found = expected in actual
        if element is None or not found:
            raise AssertionError(f"Locator expected to contain text '{expected}'\nActual value: {actual}")

    async def to_have_url(self, pattern: Any, timeout: Optional[int] = None) -> None:
        if not pattern.search(self.target.url):
            raise AssertionError(f"Page URL expected to match '{pattern.pattern}'\nActual value: {self.target.url}")


def fake_expect(target: Any) -> FakeAssertions:
    return FakeAssertions(target)
