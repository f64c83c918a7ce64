"""
================================================================================
API Testing Framework
================================================================================

Components for the API request tests.

Modules:
    - http_client: HTTP client with retry and Allure logging
    - data_loader: JSON parameter files

Author: Automation Team
License: MIT
================================================================================
"""

from .data_loader import TestDataError, load_test_data
from .http_client import HttpClient, HttpClientError, RateLimitExceeded, RetryPolicy

__all__ = [
    "HttpClient",
    "HttpClientError",
    "RateLimitExceeded",
    "RetryPolicy",
    "TestDataError",
    "load_test_data",
]
