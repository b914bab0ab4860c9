"""Protocols (interfaces) for the BigQuery backend.

The dispatcher depends on these abstractions, NEVER on concrete clients.
A ClientProvider is injected at construction and called once per tool
invocation with the project the call targets.

Usage:
    # In production (mcp_server.py):
    from bq_mcp_server.clients import live_client_provider
    provider = live_client_provider(location="US", query_timeout_seconds=60)
    dispatcher = ToolDispatcher(provider, "my-project")

    # In tests:
    from tests.fakes import FakeBigQueryClient
    fake = FakeBigQueryClient(rows=[{"id": 1}])
    dispatcher = ToolDispatcher(lambda project: fake, "p")
"""

from typing import Any, Callable, Protocol, runtime_checkable

from bq_mcp_server.types import CostEstimate, SchemaField


@runtime_checkable
class BigQueryProtocol(Protocol):
    """Interface for BigQuery operations, bound to one project.

    Concrete implementations:
    - LiveBigQueryClient (bq_mcp_server/clients.py): real BigQuery
    - FakeBigQueryClient (tests/fakes.py): canned data for unit tests

    Every method raises BackendError on failure.
    """

    def get_table_schema(self, dataset: str, table: str) -> list[SchemaField]:
        """Get the schema of a table in the client's project.

        Args:
            dataset: BigQuery dataset name.
            table: Table name.

        Returns:
            List of column dicts with keys: name, type, mode, description
            (and fields for RECORD columns).
        """
        ...

    def run_query(self, sql: str) -> list[dict[str, Any]]:
        """Execute a SQL query and return every row.

        Args:
            sql: BigQuery SQL query string, passed through unchanged.

        Returns:
            List of dicts, one per row. Column names are keys.
        """
        ...

    def estimate_query_cost(self, sql: str) -> CostEstimate:
        """Dry-run a SQL query. Must not execute it.

        Args:
            sql: BigQuery SQL query string.

        Returns:
            CostEstimate with total_bytes_processed.
        """
        ...

    def list_tables(self, dataset: str) -> list[str]:
        """List table names in a dataset of the client's project."""
        ...

    def close(self) -> None:
        """Release transport resources. Called once the invocation is done."""
        ...


ClientProvider = Callable[[str], BigQueryProtocol]
"""Builds a client for the given project id. Raises BackendError on failure."""
