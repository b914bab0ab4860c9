"""Concrete implementation of BigQueryProtocol over google-cloud-bigquery.

For unit testing, use the fakes in tests/fakes.py instead.
"""

import concurrent.futures
from functools import partial
from typing import Any

from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.cloud import bigquery

from bq_mcp_server.errors import BackendError
from bq_mcp_server.logging_config import get_logger
from bq_mcp_server.protocols import ClientProvider
from bq_mcp_server.serialization import sanitize_rows
from bq_mcp_server.types import CostEstimate, SchemaField

logger = get_logger(__name__)

# Errors raised by the google client libraries that mean "the backend said no".
_BACKEND_ERRORS = (GoogleAPIError, GoogleAuthError, concurrent.futures.TimeoutError)


def _schema_to_dicts(fields) -> list[SchemaField]:
    result: list[SchemaField] = []
    for field in fields:
        entry: SchemaField = {
            "name": field.name,
            "type": field.field_type,
            "mode": field.mode,
            "description": field.description or "",
        }
        if field.fields:
            entry["fields"] = _schema_to_dicts(field.fields)
        result.append(entry)
    return result


class LiveBigQueryClient:
    """Real BigQuery client bound to one project. Implements BigQueryProtocol.

    Usage:
        client = LiveBigQueryClient("my-project", location="US")
        rows = client.run_query("SELECT 1 AS x")
    """

    def __init__(
        self,
        project: str,
        location: str | None = None,
        query_timeout_seconds: float | None = None,
    ):
        self._project = project
        self._location = location
        self._query_timeout = query_timeout_seconds
        try:
            self._client = bigquery.Client(project=project, location=location)
        except _BACKEND_ERRORS as e:
            logger.error("bigquery_client_error", project=project, error=str(e))
            raise BackendError(str(e)) from e
        logger.info(
            "bigquery_client_initialised",
            project=self._project,
            location=self._location,
        )

    def get_table_schema(self, dataset: str, table: str) -> list[SchemaField]:
        """Get schema for a table, nested RECORD fields included."""
        table_ref = f"{self._project}.{dataset}.{table}"
        try:
            bq_table = self._client.get_table(table_ref)
        except _BACKEND_ERRORS as e:
            logger.error("bigquery_schema_error", table=table_ref, error=str(e))
            raise BackendError(str(e)) from e
        return _schema_to_dicts(bq_table.schema)

    def run_query(self, sql: str) -> list[dict[str, Any]]:
        """Execute a SQL query and return all rows as JSON-safe dicts."""
        logger.info("bigquery_execute", sql_preview=sql[:200])
        try:
            job = self._client.query(sql)
            df = job.result(timeout=self._query_timeout).to_dataframe()
        except _BACKEND_ERRORS as e:
            logger.error("bigquery_execute_error", error=str(e), sql_preview=sql[:200])
            raise BackendError(str(e)) from e
        rows = sanitize_rows(df.to_dict(orient="records"))
        logger.info("bigquery_results", rows=len(rows))
        return rows

    def estimate_query_cost(self, sql: str) -> CostEstimate:
        """Dry-run a SQL query. Nothing is executed or billed."""
        job_config = bigquery.QueryJobConfig(dry_run=True, use_query_cache=False)
        try:
            job = self._client.query(sql, job_config=job_config)
        except _BACKEND_ERRORS as e:
            logger.error("bigquery_dry_run_error", error=str(e), sql_preview=sql[:200])
            raise BackendError(str(e)) from e
        if job.total_bytes_processed is None:
            raise BackendError("dry run returned no query statistics")
        return {
            "total_bytes_processed": int(job.total_bytes_processed),
            "statement_type": job.statement_type,
            "referenced_tables": [
                f"{ref.project}.{ref.dataset_id}.{ref.table_id}"
                for ref in (job.referenced_tables or [])
            ],
        }

    def list_tables(self, dataset: str) -> list[str]:
        """List table ids in a dataset, in the order BigQuery returns them."""
        dataset_ref = f"{self._project}.{dataset}"
        try:
            return [t.table_id for t in self._client.list_tables(dataset_ref)]
        except _BACKEND_ERRORS as e:
            logger.error("bigquery_list_tables_error", dataset=dataset_ref, error=str(e))
            raise BackendError(str(e)) from e

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._client.close()


def live_client_provider(
    location: str | None = None, query_timeout_seconds: float | None = None
) -> ClientProvider:
    """Build a provider creating one LiveBigQueryClient per project request."""
    return partial(
        LiveBigQueryClient,
        location=location,
        query_timeout_seconds=query_timeout_seconds,
    )
