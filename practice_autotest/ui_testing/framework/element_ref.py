"""
================================================================================
Element References
================================================================================

Symbolic element locators for page objects.

An ElementRef holds only selector strings. It is resolved to a Playwright
Locator at interaction time through `resolve(page)`; a fresh Locator is built
on every call so it always reflects the current DOM.

Usage:
    USERNAME = ElementRef("username_input", "#username")
    LOGOUT = ElementRef("logout_button", "a:has-text('Log out')",
                        fallbacks=("[aria-label='Log out']",))

    locator = USERNAME.resolve(page)
    await locator.fill("student")

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from playwright.async_api import Locator, Page


@dataclass(frozen=True)
class ElementRef:
    """
    Lazily-bound element reference.

    Attributes:
        name: Human-readable element name for logs and Allure steps
        selector: Primary Playwright selector
        fallbacks: Alternative selectors, OR-ed with the primary one
        sensitive: Mask values typed into this element in logs/reports
    """
    name: str
    selector: str
    fallbacks: Tuple[str, ...] = field(default_factory=tuple)
    sensitive: bool = False

    def __post_init__(self) -> None:
        if not self.selector:
            raise ValueError(f"ElementRef '{self.name}' requires a selector")

    @property
    def selectors(self) -> Tuple[str, ...]:
        """Primary selector followed by fallbacks."""
        return (self.selector, *self.fallbacks)

    def resolve(self, page: Page) -> Locator:
        """
        Build a Locator for this reference against `page`.

        Fallback selectors are combined with `Locator.or_`; `.first` keeps
        strict mode from failing when more than one candidate matches.
        """
        locator = page.locator(self.selector)
        for fallback in self.fallbacks:
            locator = locator.or_(page.locator(fallback))
        return locator.first

    def mask(self, value: str) -> str:
        """Return `value` as it may appear in logs."""
        return "*" * len(value) if self.sensitive else value

    def __str__(self) -> str:
        return f"{self.name} ({' | '.join(self.selectors)})"


__all__ = [
    "ElementRef",
]
