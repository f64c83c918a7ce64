"""
================================================================================
Common Utilities
================================================================================

Shared configuration and logging setup for the UI and API suites.

Usage:
    from practice_autotest.common import ConfigLoader, init_logger

    init_logger()
    base_url = ConfigLoader().get("ui.base_url")

================================================================================
"""

from .config_loader import ConfigLoader, ConfigurationError
from .log_setup import init_logger

__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "init_logger",
]
