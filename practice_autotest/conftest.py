"""
================================================================================
Root Pytest Configuration
================================================================================

Registers project-wide markers and tags tests by suite directory.

================================================================================
"""

import pytest


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line("markers", "P0: Critical priority tests - must pass for deployment")
    config.addinivalue_line("markers", "P1: High priority tests - important functionality")
    config.addinivalue_line("markers", "P2: Medium priority tests - edge cases and minor features")
    config.addinivalue_line("markers", "P3: Low priority tests - extensive validation")

    # Test type markers
    config.addinivalue_line("markers", "smoke: Quick verification tests")
    config.addinivalue_line("markers", "regression: Full regression test suite")
    config.addinivalue_line("markers", "e2e: End-to-end tests simulating user flows")
    config.addinivalue_line("markers", "unit: Offline framework tests")

    # Domain markers
    config.addinivalue_line("markers", "api: API-specific tests")
    config.addinivalue_line("markers", "ui: UI-specific tests")
    config.addinivalue_line("markers", "auth: Tests related to authentication")

    # Dependency markers
    config.addinivalue_line(
        "markers", "requires_external: Tests requiring the live site or live API"
    )


def pytest_collection_modifyitems(config, items):
    """Tag tests with their suite marker based on directory."""
    for item in items:
        parts = item.path.parts
        if "api_testing" in parts:
            item.add_marker(pytest.mark.api)
        elif "ui_testing" in parts:
            item.add_marker(pytest.mark.ui)
        elif "unit" in parts:
            item.add_marker(pytest.mark.unit)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "Practice Login Automation Suite",
        "=" * 60,
        "",
    ]
