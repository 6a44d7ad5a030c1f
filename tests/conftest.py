"""
Pytest configuration and shared fixtures for wclang tests.
"""

import logging

import pytest

# Import test fixtures to make them available to all tests
# These imports register the fixtures with pytest's fixture discovery system
# ruff: noqa: F401
from tests.fixtures.toolchains import (
    mingw_root,
    clang_bindir,
    linux_host,
    driver_config,
    driver_settings,
    driver_environ,
)


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def restore_logging():
    """Restore root logger handlers after a test reconfigures logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
