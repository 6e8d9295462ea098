# tests/conftest.py
"""Shared test setup for project.

Tests are grouped in tiers:
- 3_independent: value types, labels, syntax; no cross-module behavior
- 5_core: resolution, generation, merging and configuration
- 9_integration: the full pipeline against a temporary repository
"""

from collections.abc import Generator

import pytest

import buildsmith.logs as mod_logs
from tests.utils import DEFAULT_TEST_LOG_LEVEL
from tests.utils.log_fixtures import (
    captured_warnings,
    module_logger,
)


# These fixtures are intentionally re-exported so pytest can discover them.
__all__ = [
    "captured_warnings",
    "module_logger",
]


@pytest.fixture(autouse=True)
def reset_logger_level() -> Generator[None, None, None]:
    """Reset logger level to DEFAULT_TEST_LOG_LEVEL (test)
        before each test for isolation.

    run_update() changes the app logger's level from configuration; this
    keeps that from leaking into later tests.
    """
    logger = mod_logs.getAppLogger()
    logger.setLevel(DEFAULT_TEST_LOG_LEVEL)  # test
    yield
    logger.setLevel(DEFAULT_TEST_LOG_LEVEL)  # test
