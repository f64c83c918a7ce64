"""
================================================================================
Page Object Exceptions
================================================================================

Error taxonomy raised by BasePage and concrete page objects.

    PageObjectError
     ├── NavigationError        navigation target unreachable
     ├── WaitTimeoutError       a bounded wait expired
     │    └── ElementNotFoundError
     ├── InteractionError       element found but not interactable
     └── PageStateError         operation called in the wrong page state

    AssertionFailure (AssertionError)  explicit validation was false

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations


class PageObjectError(Exception):
    """Base exception for page object failures."""
    pass


class NavigationError(PageObjectError):
    """Raised when a navigation target is unreachable within the timeout."""
    pass


class WaitTimeoutError(PageObjectError):
    """Raised when a bounded wait (page load, element, URL) expires."""
    pass


class ElementNotFoundError(WaitTimeoutError):
    """Raised when an element never became attached and visible."""
    pass


class InteractionError(PageObjectError):
    """Raised when an element is disabled, covered or not editable."""
    pass


class PageStateError(PageObjectError):
    """Raised when a page object operation is called from the wrong state."""
    pass


class AssertionFailure(AssertionError):
    """
    Raised by every `assert_*` page method.

    Subclasses AssertionError so pytest reports it as a regular assertion.
    The caller-supplied message is kept verbatim in `message`.
    """

    def __init__(self, message: str, detail: str = "") -> None:
        self.message = message
        self.detail = detail
        super().__init__(f"{message}\n{detail}" if detail else message)


__all__ = [
    "PageObjectError",
    "NavigationError",
    "WaitTimeoutError",
    "ElementNotFoundError",
    "InteractionError",
    "PageStateError",
    "AssertionFailure",
]
