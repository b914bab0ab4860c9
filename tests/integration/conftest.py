"""Integration test fixtures: real processes and real BigQuery, not fakes.

All tests in this directory are automatically marked with @pytest.mark.integration.
Run them with: pytest -m integration

Live BigQuery tests need Application Default Credentials and
BQ_INTEGRATION_PROJECT (plus optional BQ_INTEGRATION_LOCATION); they are
skipped otherwise.
"""

import os

import pytest


def pytest_collection_modifyitems(items):
    """Automatically mark all tests in this directory as integration."""
    for item in items:
        if "/integration/" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture(scope="session")
def live_project() -> str:
    project = os.environ.get("BQ_INTEGRATION_PROJECT")
    if not project:
        pytest.skip("BQ_INTEGRATION_PROJECT not set, cannot run live BigQuery tests")
    return project


@pytest.fixture(scope="session")
def live_location() -> str:
    return os.environ.get("BQ_INTEGRATION_LOCATION", "US")
