"""Tests that the fake client satisfies BigQueryProtocol and behaves as documented."""

import pytest

from bq_mcp_server.errors import BackendError
from bq_mcp_server.protocols import BigQueryProtocol
from tests.fakes import FakeBigQueryClient, FakeClientProvider


class TestFakeBigQueryClient:
    def test_satisfies_protocol(self):
        assert isinstance(FakeBigQueryClient(), BigQueryProtocol)

    def test_returns_canned_data(self):
        client = FakeBigQueryClient(
            schema=[{"name": "id", "type": "INT64"}],
            rows=[{"id": 1}],
            estimate_bytes=42,
            tables=["t"],
        )

        assert client.get_table_schema("d", "t") == [{"name": "id", "type": "INT64"}]
        assert client.run_query("SELECT 1") == [{"id": 1}]
        assert client.estimate_query_cost("SELECT 1")["total_bytes_processed"] == 42
        assert client.list_tables("d") == ["t"]

    def test_records_calls_in_order(self):
        client = FakeBigQueryClient()

        client.estimate_query_cost("Q")
        client.run_query("Q")

        assert client.calls == [("estimate_query_cost", ("Q",)), ("run_query", ("Q",))]

    def test_error_raised_by_every_operation(self):
        client = FakeBigQueryClient(error=BackendError("boom"))

        for call in (
            lambda: client.get_table_schema("d", "t"),
            lambda: client.run_query("Q"),
            lambda: client.estimate_query_cost("Q"),
            lambda: client.list_tables("d"),
        ):
            with pytest.raises(BackendError):
                call()
        assert len(client.calls) == 4


class TestFakeClientProvider:
    def test_records_projects(self):
        fake = FakeBigQueryClient()
        provider = FakeClientProvider(fake)

        assert provider("a") is fake
        assert provider("b") is fake
        assert provider.projects == ["a", "b"]
