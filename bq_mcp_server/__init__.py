"""BigQuery MCP server: schema, query, dry-run and table-listing tools."""

from bq_mcp_server.dispatcher import ToolDispatcher
from bq_mcp_server.errors import (
    BackendError,
    BigQueryMCPError,
    GuardRejection,
    SerializationError,
    SourceReadError,
)

__all__ = [
    "ToolDispatcher",
    "BigQueryMCPError",
    "BackendError",
    "GuardRejection",
    "SourceReadError",
    "SerializationError",
]
