"""
================================================================================
UI Testing Pytest Configuration
================================================================================

Fixtures for browser management, page objects and the routed mock of the
practice site.

Key Features:
- Session browser, per-test isolated context and page
- `mock_site`: serves the practice login pages from tests/data through
  Playwright routing, so the login flow runs without network access
- Screenshot / URL / API capture attached to Allure when a test fails

================================================================================
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import AsyncGenerator, Dict
from urllib.parse import urlparse

import pytest
from loguru import logger
from playwright.async_api import BrowserContext, Page, Route
from playwright.async_api import Error as PlaywrightError

from practice_autotest.common.config_loader import ConfigLoader
from practice_autotest.ui_testing.framework.browser_manager import BrowserManager
from practice_autotest.ui_testing.pages.login_page import LoginCredentials, LoginPage
from practice_autotest.unit.fakes import DummyConfig


DATA_DIR = Path(__file__).parent / "data"

MOCK_BASE_URL = "http://practice.test"

# path -> file under tests/data
MOCK_PAGES: Dict[str, str] = {
    "/practice-test-login/": "practice_login.html",
    "/logged-in-successfully/": "logged_in_successfully.html",
    "/widgets/": "widgets.html",
}

# Paths whose requests are aborted, simulating an unreachable target
MOCK_UNREACHABLE = {"/unreachable/"}


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture(scope="session")
async def browser_manager(pytestconfig) -> AsyncGenerator[BrowserManager, None]:
    """
    Session-scoped browser manager.

    Skips the UI suite when the Playwright browser binary is not installed.
    """
    manager = BrowserManager(
        headless=not pytestconfig.getoption("--ui-headed"),
        browser_type=pytestconfig.getoption("--ui-browser"),
    )
    try:
        await manager.start()
    except PlaywrightError as e:
        pytest.skip(f"Playwright browser unavailable: {str(e).splitlines()[0]}")
    yield manager
    await manager.close()


@pytest.fixture
async def context(browser_manager: BrowserManager) -> AsyncGenerator[BrowserContext, None]:
    """Function-scoped browser context: one browsing context per test."""
    context = await browser_manager.new_context()
    yield context
    await browser_manager.release_context(context)


@pytest.fixture
async def page(browser_manager: BrowserManager, context: BrowserContext) -> AsyncGenerator[Page, None]:
    page = await browser_manager.new_page(context)
    yield page
    await page.close()


# ================================================================================
# Mock Practice Site
# ================================================================================

@pytest.fixture
async def mock_site(context: BrowserContext) -> str:
    """Route MOCK_BASE_URL to local HTML files and return the base URL."""

    async def handle(route: Route) -> None:
        path = urlparse(route.request.url).path
        if path in MOCK_UNREACHABLE:
            await route.abort("connectionrefused")
            return
        filename = MOCK_PAGES.get(path)
        if filename is None:
            await route.fulfill(status=404, content_type="text/html", body="<h1>Not Found</h1>")
            return
        await route.fulfill(
            status=200,
            content_type="text/html",
            body=(DATA_DIR / filename).read_text(encoding="utf-8"),
        )

    await context.route(f"{MOCK_BASE_URL}/**", handle)
    return MOCK_BASE_URL


@pytest.fixture
def ui_config() -> DummyConfig:
    """Short timeouts so negative paths fail fast against the mock site."""
    return DummyConfig({
        "ui.timeouts.page_load": 10000,
        "ui.timeouts.element": 3000,
        "ui.timeouts.action": 2000,
        "ui.timeouts.visibility": 1000,
        "ui.timeouts.assertion": 2000,
    })


# ================================================================================
# Page Object Fixtures
# ================================================================================

@pytest.fixture
async def login_page(page: Page, mock_site: str, ui_config: DummyConfig, request) -> AsyncGenerator[LoginPage, None]:
    """LoginPage bound to the mock site; captures failure details on teardown."""
    login = LoginPage(page, base_url=mock_site, config=ui_config)
    yield login
    report = getattr(request.node, "rep_call", None)
    if report is not None and report.failed:
        try:
            await login.capture_failure(request.node.name)
        except PlaywrightError as e:
            logger.warning(f"Failed to capture failure details: {e}")


@pytest.fixture
async def live_login_page(page: Page, request) -> AsyncGenerator[LoginPage, None]:
    """LoginPage bound to `ui.base_url` (the real practice site by default)."""
    login = LoginPage(page, config=ConfigLoader())
    yield login
    report = getattr(request.node, "rep_call", None)
    if report is not None and report.failed:
        try:
            await login.capture_failure(request.node.name)
        except PlaywrightError as e:
            logger.warning(f"Failed to capture failure details: {e}")


# ================================================================================
# Test Data
# ================================================================================

@pytest.fixture
def valid_credentials() -> LoginCredentials:
    """Seeded valid pair of the practice site (and of the mock)."""
    return LoginCredentials(username="student", password="Password123")


@pytest.fixture
def live_credentials() -> LoginCredentials:
    """Credentials for the live site, overridable through the environment."""
    return LoginCredentials(
        username=os.getenv("UI_USERNAME", "student"),
        password=os.getenv("UI_PASSWORD", "Password123"),
    )


@pytest.fixture
def invalid_credentials() -> LoginCredentials:
    return LoginCredentials(username="incorrectUser", password="incorrectPassword")
