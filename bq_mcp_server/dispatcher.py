"""Tool dispatcher: maps each MCP tool to its BigQuery effect.

Per invocation the dispatcher resolves the target project, obtains a fresh
client from the injected provider, applies the scan-budget guard to query
execution, shapes the result and returns one JSON text payload. Errors
propagate unchanged; FastMCP reports them as tool errors.
The client is closed when the invocation ends, on success or failure.

Blocking calls run in worker threads with abandon_on_cancel=True, so a
cancelled invocation stops waiting immediately instead of hanging on
BigQuery. The dispatcher holds only immutable configuration and is safe to
share between concurrent invocations.
"""

import re
from contextlib import asynccontextmanager, nullcontext
from typing import Any, AsyncIterator, Callable, TypeVar

import anyio

from bq_mcp_server.addressing import resolve_project
from bq_mcp_server.config import Settings
from bq_mcp_server.logging_config import get_logger
from bq_mcp_server.protocols import BigQueryProtocol, ClientProvider
from bq_mcp_server.query_guard import enforce_scan_budget, parse_scan_budget
from bq_mcp_server.serialization import to_json_payload
from bq_mcp_server.shaping import shape_rows, shape_table_names
from bq_mcp_server.sql_source import read_sql_file

logger = get_logger(__name__)

R = TypeVar("R")


async def _in_thread(func: Callable[..., R], *args: Any) -> R:
    return await anyio.to_thread.run_sync(func, *args, abandon_on_cancel=True)


class ToolDispatcher:
    """Single entry point for all tool invocations.

    Args:
        provider: Builds a BigQuery client for a project id.
        default_project: Project used when a call gives no override, and
            always for query execution and dry runs.
        table_filter: Compiled regex; list_tables keeps only matching names.
        max_query_bytes: Scan budget. None or <= 0 disables the guard.
        timeout_seconds: Deadline for a whole invocation. None disables it.
    """

    def __init__(
        self,
        provider: ClientProvider,
        default_project: str,
        *,
        table_filter: re.Pattern | None = None,
        max_query_bytes: int | None = None,
        timeout_seconds: float | None = None,
    ):
        self._provider = provider
        self._default_project = default_project
        self._table_filter = table_filter
        self._max_query_bytes = parse_scan_budget(max_query_bytes)
        self._timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(cls, settings: Settings, provider: ClientProvider) -> "ToolDispatcher":
        """Build a dispatcher from settings.

        Raises:
            re.error: If settings.table_filter is not a valid regex.
        """
        table_filter = re.compile(settings.table_filter) if settings.table_filter else None
        return cls(
            provider,
            settings.gcp_project,
            table_filter=table_filter,
            max_query_bytes=settings.max_bq_query_bytes,
            timeout_seconds=settings.tool_timeout_seconds,
        )

    @property
    def default_project(self) -> str:
        return self._default_project

    @property
    def table_filter(self) -> re.Pattern | None:
        return self._table_filter

    @property
    def max_query_bytes(self) -> int | None:
        return self._max_query_bytes

    def _deadline(self):
        if self._timeout_seconds is None:
            return nullcontext()
        return anyio.fail_after(self._timeout_seconds)

    @asynccontextmanager
    async def _client(self, project: str) -> AsyncIterator[BigQueryProtocol]:
        client = await _in_thread(self._provider, project)
        try:
            yield client
        finally:
            client.close()

    async def _query(self, sql: str) -> str:
        logger.info(
            "dispatch_query",
            sql_preview=sql[:200],
            guarded=self._max_query_bytes is not None,
        )
        async with self._client(self._default_project) as client:
            if self._max_query_bytes is not None:
                estimate = await _in_thread(client.estimate_query_cost, sql)
                enforce_scan_budget(estimate, self._max_query_bytes)
            rows = await _in_thread(client.run_query, sql)
        shaped = shape_rows(rows)
        logger.info("dispatch_query_complete", row_count=len(rows), returned=len(shaped))
        return to_json_payload(shaped)

    async def _dry_run(self, sql: str) -> str:
        logger.info("dispatch_dry_run", sql_preview=sql[:200])
        async with self._client(self._default_project) as client:
            estimate = await _in_thread(client.estimate_query_cost, sql)
        return to_json_payload(estimate)

    # --- Tools ---

    async def get_schema(self, dataset: str, table: str, dataset_project: str = "") -> str:
        """Return the table schema as JSON, unshaped."""
        project = resolve_project(self._default_project, dataset_project)
        logger.info("dispatch_schema", project=project, dataset=dataset, table=table)
        with self._deadline():
            async with self._client(project) as client:
                schema = await _in_thread(client.get_table_schema, dataset, table)
        return to_json_payload(schema)

    async def run_query(self, sql: str) -> str:
        """Run SQL and return at most 100 rows as JSON.

        With a scan budget configured the query is dry-run first; the
        estimate must complete and pass before execution is issued.
        """
        with self._deadline():
            return await self._query(sql)

    async def run_query_file(self, path: str) -> str:
        """Load SQL from a file, then behave exactly as run_query."""
        with self._deadline():
            sql = await _in_thread(read_sql_file, path)
            return await self._query(sql)

    async def estimate_query_cost(self, sql: str) -> str:
        """Dry-run SQL and return its statistics as JSON. Never guarded."""
        with self._deadline():
            return await self._dry_run(sql)

    async def estimate_query_cost_file(self, path: str) -> str:
        """Load SQL from a file, then behave exactly as estimate_query_cost."""
        with self._deadline():
            sql = await _in_thread(read_sql_file, path)
            return await self._dry_run(sql)

    async def list_tables(self, dataset: str, dataset_project: str = "") -> str:
        """List tables as JSON: filtered by the table filter, then capped at 100."""
        project = resolve_project(self._default_project, dataset_project)
        logger.info("dispatch_tables", project=project, dataset=dataset)
        with self._deadline():
            async with self._client(project) as client:
                names = await _in_thread(client.list_tables, dataset)
        shaped = shape_table_names(names, self._table_filter)
        logger.info("dispatch_tables_complete", total=len(names), returned=len(shaped))
        return to_json_payload(shaped)
