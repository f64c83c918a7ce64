"""
================================================================================
Test Data Loader
================================================================================

Loads JSON parameter files used to drive API request tests.

    testdata/parametro_buscar.json -> load_test_data("parametro_buscar")

================================================================================
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from loguru import logger


DEFAULT_TESTDATA_DIR = Path(__file__).parent.parent / "testdata"


class TestDataError(Exception):
    """Raised when a parameter file is missing or malformed."""
    __test__ = False


def load_test_data(
    name: str,
    directory: Optional[Union[str, Path]] = None,
) -> Dict[str, Any]:
    """
    Load a JSON object from the test data directory.

    Args:
        name: File name, with or without the .json suffix
        directory: Directory to read from (defaults to api_testing/testdata)

    Returns:
        The decoded JSON object

    Raises:
        TestDataError: File missing, invalid JSON, or not a JSON object
    """
    base_dir = Path(directory) if directory else DEFAULT_TESTDATA_DIR
    filename = name if name.endswith(".json") else f"{name}.json"
    path = base_dir / filename

    if not path.exists():
        raise TestDataError(f"Test data file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise TestDataError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise TestDataError(f"Test data in {path} must be a JSON object")

    logger.debug(f"Loaded test data: {path}")
    return data


__all__ = [
    "load_test_data",
    "TestDataError",
    "DEFAULT_TESTDATA_DIR",
]
