"""
Practice login automation package.

Page objects for the practice login site plus the API request suites:
  - `ui_testing`: Playwright page objects, browser lifecycle, UI tests
  - `api_testing`: httpx client, JSON parameter files, API tests
  - `common`: configuration and logging shared by both
  - `unit`: offline tests of the framework itself

Kept importable for IDE navigation, `run_tests.py` and CI imports.
"""

__version__ = "1.0.0"
