"""
================================================================================
Page Objects
================================================================================

Page Object Model implementations for application pages.

Each page class encapsulates:
    - Element references
    - Page-specific actions
    - Verification methods and probes

Author: Automation Team
License: MIT
================================================================================
"""

from .login_page import LoginCredentials, LoginPage, LoginState

__all__ = [
    "LoginCredentials",
    "LoginPage",
    "LoginState",
]
