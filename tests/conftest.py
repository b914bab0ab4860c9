"""Shared test fixtures for the bq-mcp-server test suite."""

import os

import pytest

from bq_mcp_server.dispatcher import ToolDispatcher
from tests.fakes import FakeBigQueryClient, FakeClientProvider

# Set env vars at module level so they're available during test collection.
_TEST_ENV = {
    "GCP_PROJECT": "test-project",
    "BQ_LOCATION": "US",
}

# Settings that tests must not inherit from the developer's shell.
_UNSET_ENV = [
    "TABLE_FILTER",
    "MAX_BQ_QUERY_BYTES",
    "TOOL_TIMEOUT_SECONDS",
    "MCP_TRANSPORT",
    "MCP_HOST",
    "MCP_PORT",
    "BQ_QUERY_TIMEOUT_SECONDS",
    "LOG_LEVEL",
]

for _key, _val in _TEST_ENV.items():
    os.environ.setdefault(_key, _val)


@pytest.fixture(autouse=True)
def set_test_env(monkeypatch):
    """Pin environment variables for all tests.

    Every env var that pydantic Settings requires MUST be set here.
    """
    for key, val in _TEST_ENV.items():
        monkeypatch.setenv(key, val)
    for key in _UNSET_ENV:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def fake_bq():
    """A fake client with no canned data."""
    return FakeBigQueryClient()


@pytest.fixture
def provider(fake_bq):
    return FakeClientProvider(fake_bq)


@pytest.fixture
def dispatcher(provider):
    """Dispatcher with default project "p", no filter and no scan budget."""
    return ToolDispatcher(provider, "p")
