"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based (async) page object framework.

Components:
    - element_ref: lazily-resolved element references
    - page_base: base page object (waits, interactions, queries, assertions)
    - probe: timeout-to-boolean probes
    - exceptions: page object error taxonomy
    - browser_manager: browser lifecycle management

Author: Automation Team
License: MIT
================================================================================
"""

from .browser_manager import BrowserManager
from .element_ref import ElementRef
from .exceptions import (
    AssertionFailure,
    ElementNotFoundError,
    InteractionError,
    NavigationError,
    PageObjectError,
    PageStateError,
    WaitTimeoutError,
)
from .page_base import BasePage, PageTimeouts
from .probe import ProbeResult, probe

__all__ = [
    "AssertionFailure",
    "BasePage",
    "BrowserManager",
    "ElementNotFoundError",
    "ElementRef",
    "InteractionError",
    "NavigationError",
    "PageObjectError",
    "PageStateError",
    "PageTimeouts",
    "ProbeResult",
    "WaitTimeoutError",
    "probe",
]
