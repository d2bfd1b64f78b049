"""Pytest configuration for the end-to-end scenarios."""

import pytest


def pytest_collection_modifyitems(items):
    """Mark the API-plus-database scenarios as integration tests."""
    for item in items:
        if "integration_tests" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
