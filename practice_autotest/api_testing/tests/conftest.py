"""
================================================================================
API Request Test Fixtures
================================================================================

    - api_config: the ConfigLoader singleton (api.* keys)
    - base_url: api.base_url for the active TEST_ENV
    - http_client: an open HttpClient, closed after the test

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Iterator

import allure
import pytest

from practice_autotest.api_testing.framework import HttpClient
from practice_autotest.common.config_loader import ConfigLoader


@pytest.fixture(scope="session")
def api_config() -> ConfigLoader:
    return ConfigLoader()


@pytest.fixture(scope="session")
def base_url(api_config: ConfigLoader) -> str:
    return api_config.get("api.base_url", "http://localhost:8000")


@pytest.fixture
def http_client(api_config: ConfigLoader, base_url: str) -> Iterator[HttpClient]:
    """
    Open client against `base_url`.

    Usage:
        def test_audit(http_client):
            response = http_client.get("/api/v1/guia-despacho/auditoria", params={...})
    """
    with HttpClient(api_config, base_url=base_url) as client:
        yield client


def pytest_exception_interact(node, call, report):
    """Put the failure text next to the request attachments in Allure."""
    if report.failed and call.excinfo is not None:
        allure.attach(
            str(call.excinfo.value),
            name="Failure",
            attachment_type=allure.attachment_type.TEXT,
        )
