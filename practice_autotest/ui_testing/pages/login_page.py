"""
================================================================================
Login Page Object (Async / Playwright)
================================================================================

Page object for the practice login form and the two pages it leads to:

    UNLOADED --navigate--> FORM_VISIBLE --submit--> SUBMITTED --+--> SUCCESS
                                                                 +--> ERROR

`click_submit()` does not decide which terminal page was reached. The
outcome is only recorded when the caller runs a validator or the
`is_login_successful()` probe. Terminal-page validators called before a
submit raise PageStateError.

================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

import allure
from loguru import logger
from playwright.async_api import Page

from practice_autotest.ui_testing.framework.element_ref import ElementRef
from practice_autotest.ui_testing.framework.exceptions import PageStateError
from practice_autotest.ui_testing.framework.page_base import BasePage


LOGIN_PATH = "/practice-test-login/"
SUCCESS_PATH_FRAGMENT = "/logged-in-successfully/"
ERROR_TEXT = "Your username is invalid!"
SUCCESS_TEXT = "Logged In Successfully"
LOGIN_SUCCESS_TIMEOUT_MS = 10000


class LoginState(Enum):
    UNLOADED = "unloaded"
    FORM_VISIBLE = "form_visible"
    SUBMITTED = "submitted"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class LoginCredentials:
    """Username/password pair, only held for the duration of a login call."""
    username: str
    password: str = field(repr=False)

    def __repr__(self) -> str:
        return f"LoginCredentials(username={self.username!r}, password='***')"


class LoginPage(BasePage):
    """Login page object (async)."""

    URL_PATH = LOGIN_PATH

    # Login form
    USERNAME_INPUT = ElementRef("username_input", "#username")
    PASSWORD_INPUT = ElementRef("password_input", "#password", sensitive=True)
    SUBMIT_BUTTON = ElementRef("submit_button", "#submit")

    # Success page
    SUCCESS_MESSAGE = ElementRef("success_message", ".post-title")
    LOGOUT_BUTTON = ElementRef("logout_button", "a:has-text('Log out')")

    # Error state
    ERROR_MESSAGE = ElementRef("error_message", "#error")

    _TERMINAL_VALIDATION_STATES = (LoginState.SUBMITTED, LoginState.SUCCESS, LoginState.ERROR)

    def __init__(
        self,
        page: Page,
        base_url: str = "",
        config: Optional[Any] = None,
    ):
        super().__init__(page, base_url=base_url, config=config)
        self._state = LoginState.UNLOADED

    @property
    def state(self) -> LoginState:
        return self._state

    def _transition(self, new_state: LoginState) -> None:
        if new_state is not self._state:
            logger.debug(f"LoginPage state: {self._state.value} -> {new_state.value}")
        self._state = new_state

    def _require_submitted(self, validator: str) -> None:
        if self._state not in self._TERMINAL_VALIDATION_STATES:
            raise PageStateError(
                f"{validator}() checks a post-submit page but the login page is "
                f"in state '{self._state.value}'; call login() or click_submit() first"
            )

    # =========================================================================
    # Actions
    # =========================================================================

    @allure.step("Open login page")
    async def navigate_to_login_page(self) -> None:
        """Navigate to the login path and wait for the page to load."""
        await self.navigate_to(LOGIN_PATH)
        await self.wait_for_page_load()
        self._transition(LoginState.FORM_VISIBLE)

    async def enter_username(self, username: str) -> None:
        await self.wait_for_element(self.USERNAME_INPUT)
        await self.fill_input(self.USERNAME_INPUT, username)

    async def enter_password(self, password: str) -> None:
        await self.wait_for_element(self.PASSWORD_INPUT)
        await self.fill_input(self.PASSWORD_INPUT, password)

    async def click_submit(self) -> None:
        """Submit the form. Which page follows is left to the validators."""
        await self.wait_for_element(self.SUBMIT_BUTTON)
        await self.click_element(self.SUBMIT_BUTTON)
        self._transition(LoginState.SUBMITTED)

    async def login(self, username: str, password: str) -> None:
        """
        Fill both fields and submit, in that order.

        A failing step stops the sequence; nothing is retried or rolled back.
        The Allure step carries the username only.
        """
        with allure.step(f"Login (username={username})"):
            logger.info(f"Logging in as '{username}'")
            await self.enter_username(username)
            await self.enter_password(password)
            await self.click_submit()

    async def login_with(self, credentials: LoginCredentials) -> None:
        await self.login(credentials.username, credentials.password)

    # =========================================================================
    # Validations (fail the test)
    # =========================================================================

    @allure.step("Validate login page is loaded")
    async def validate_login_page_loaded(self) -> None:
        """
        Check the three form controls and the login URL.

        All four checks run; a single AssertionFailure lists every failed one.
        """
        await self.assert_all(
            self.assert_element_visible(self.USERNAME_INPUT, "Username field should be visible"),
            self.assert_element_visible(self.PASSWORD_INPUT, "Password field should be visible"),
            self.assert_element_visible(self.SUBMIT_BUTTON, "Submit button should be visible"),
            self.assert_url_contains(LOGIN_PATH, "Should be on login page"),
        )
        if self._state is LoginState.UNLOADED:
            self._transition(LoginState.FORM_VISIBLE)

    @allure.step("Validate failed login")
    async def validate_failed_login(self) -> None:
        self._require_submitted("validate_failed_login")
        await self.assert_element_visible(self.ERROR_MESSAGE, "Error message should be visible")
        await self.assert_element_contains_text(
            self.ERROR_MESSAGE,
            ERROR_TEXT,
            f'Error message should contain "{ERROR_TEXT}"',
        )
        self._transition(LoginState.ERROR)

    @allure.step("Validate successful login")
    async def validate_successful_login(self) -> None:
        self._require_submitted("validate_successful_login")
        await self.assert_url_contains(SUCCESS_PATH_FRAGMENT, "Should be on success page")
        await self.assert_element_visible(self.SUCCESS_MESSAGE, "Success message should be visible")
        await self.assert_element_contains_text(
            self.SUCCESS_MESSAGE,
            SUCCESS_TEXT,
            f'Success message should contain "{SUCCESS_TEXT}"',
        )
        await self.assert_element_visible(self.LOGOUT_BUTTON, "Logout button should be visible")
        self._transition(LoginState.SUCCESS)

    # =========================================================================
    # Queries and probes (never fail the test)
    # =========================================================================

    async def is_login_successful(self) -> bool:
        """Return True if the success URL shows up within 10 s."""
        result = await self.probe(
            self.wait_for_url_to_contain(SUCCESS_PATH_FRAGMENT, LOGIN_SUCCESS_TIMEOUT_MS),
            description="login successful",
        )
        if result.ok:
            self._transition(LoginState.SUCCESS)
        return result.ok

    async def get_success_message(self) -> str:
        await self.wait_for_element(self.SUCCESS_MESSAGE)
        return await self.get_element_text(self.SUCCESS_MESSAGE)

    async def get_error_message(self) -> str:
        await self.wait_for_element(self.ERROR_MESSAGE)
        return await self.get_element_text(self.ERROR_MESSAGE)

    async def is_logout_button_visible(self) -> bool:
        return await self.is_element_visible(self.LOGOUT_BUTTON)


__all__ = [
    "LoginPage",
    "LoginState",
    "LoginCredentials",
    "LOGIN_PATH",
    "SUCCESS_PATH_FRAGMENT",
    "ERROR_TEXT",
    "SUCCESS_TEXT",
    "LOGIN_SUCCESS_TIMEOUT_MS",
]
