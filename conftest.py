"""
Repository-level pytest configuration.

Why this exists:
  - Provide safe defaults for local runs (no secrets embedded)
  - Register command line options shared by the UI and API suites
  - Skip tests that need external services unless explicitly enabled
  - Keep the call-phase report on the item so fixtures can react to failures
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator

import pytest

from practice_autotest.common.log_setup import init_logger


RUN_EXTERNAL_ENV = "RUN_EXTERNAL_TESTS"


def pytest_addoption(parser):
    group = parser.getgroup("practice_autotest")
    group.addoption(
        "--run-external",
        action="store_true",
        default=False,
        help="Run tests marked requires_external (live site / live API)",
    )
    group.addoption(
        "--ui-browser",
        choices=["chromium", "firefox", "webkit"],
        default=None,
        help="Browser for UI tests (default: ui.browser from config)",
    )
    group.addoption(
        "--ui-headed",
        action="store_true",
        default=False,
        help="Run UI tests with a visible browser",
    )


def pytest_configure(config):
    init_logger()


def pytest_collection_modifyitems(config, items):
    run_external = config.getoption("--run-external") or os.getenv(RUN_EXTERNAL_ENV) == "1"
    if run_external:
        return
    skip_external = pytest.mark.skip(
        reason=f"needs external services (use --run-external or {RUN_EXTERNAL_ENV}=1)"
    )
    for item in items:
        if "requires_external" in item.keywords:
            item.add_marker(skip_external)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session", autouse=True)
def _safe_env_defaults() -> Generator[None, None, None]:
    """
    Set safe environment defaults if not already provided by the user/CI.

    Seeded practice-site credentials are public demo values.
    """
    defaults = {
        "UI_USERNAME": "student",
        "UI_PASSWORD": "Password123",
    }

    for k, v in defaults.items():
        os.environ.setdefault(k, v)

    yield
