"""MCP server exposing BigQuery schema, query, dry-run and table tools.

Both transports (stdio and streamable HTTP) serve the same FastMCP
instance, so every call goes through the same ToolDispatcher.

CRITICAL: MCP stdio transport uses stdout for JSON-RPC. ALL application
logging goes to stderr (see logging_config.setup_logging).

Usage:
    bq-mcp-server --project my-project --region US
    bq-mcp-server --project my-project --region US --transport stdio
    MAX_BQ_QUERY_BYTES=1000000000 bq-mcp-server --project p --region US
"""

import argparse
import re
from collections.abc import Awaitable

from mcp.server.fastmcp import FastMCP
from pydantic import ValidationError

from bq_mcp_server.clients import live_client_provider
from bq_mcp_server.config import Settings
from bq_mcp_server.dispatcher import ToolDispatcher
from bq_mcp_server.logging_config import get_logger, setup_logging
from bq_mcp_server.shaping import MAX_RESULT_ITEMS

logger = get_logger(__name__)

SERVER_NAME = "bigquery-mcp-server"


async def _invoke(tool: str, call: Awaitable[str]) -> str:
    """Await a dispatcher call, logging the outcome. Errors are re-raised."""
    logger.info("tool_call_start", tool=tool)
    try:
        payload = await call
    except Exception as e:
        logger.error("tool_call_error", tool=tool, error_type=type(e).__name__, error=str(e))
        raise
    logger.info("tool_call_complete", tool=tool, payload_chars=len(payload))
    return payload


def build_mcp_server(
    dispatcher: ToolDispatcher,
    *,
    host: str = "0.0.0.0",
    port: int = 8080,
) -> FastMCP:
    """Create the FastMCP instance and register the six tools on it."""
    mcp = FastMCP(
        SERVER_NAME,
        instructions=(
            "BigQuery access: inspect table schemas, list tables, dry-run SQL "
            "for cost, and run SQL. Results are capped at "
            f"{MAX_RESULT_ITEMS} rows or table names."
        ),
        host=host,
        port=port,
    )

    @mcp.tool(name="schema", description="Get BigQuery table schema")
    async def schema(dataset: str, table: str, dataset_project: str = "") -> str:
        return await _invoke(
            "schema", dispatcher.get_schema(dataset, table, dataset_project)
        )

    @mcp.tool(
        name="query",
        description=f"Execute BigQuery SQL (returns up to {MAX_RESULT_ITEMS} rows)",
    )
    async def query(sql: str) -> str:
        return await _invoke("query", dispatcher.run_query(sql))

    @mcp.tool(
        name="queryfile",
        description=f"Execute BigQuery SQL from file (returns up to {MAX_RESULT_ITEMS} rows)",
    )
    async def queryfile(path: str) -> str:
        return await _invoke("queryfile", dispatcher.run_query_file(path))

    @mcp.tool(name="dryrun", description="Dry run BigQuery SQL")
    async def dryrun(sql: str) -> str:
        return await _invoke("dryrun", dispatcher.estimate_query_cost(sql))

    @mcp.tool(name="dryrunfile", description="Dry run BigQuery SQL from file")
    async def dryrunfile(path: str) -> str:
        return await _invoke("dryrunfile", dispatcher.estimate_query_cost_file(path))

    @mcp.tool(
        name="tables",
        description=f"List BigQuery tables in a dataset (returns up to {MAX_RESULT_ITEMS} entries)",
    )
    async def tables(dataset: str, dataset_project: str = "") -> str:
        return await _invoke("tables", dispatcher.list_tables(dataset, dataset_project))

    return mcp


def _parse_args(argv: list[str] | None = None) -> tuple[argparse.ArgumentParser, argparse.Namespace]:
    parser = argparse.ArgumentParser(
        prog="bq-mcp-server",
        description="MCP server for BigQuery schema lookup, queries and dry runs",
    )
    parser.add_argument("--project", help="Google Cloud project ID for BigQuery client")
    parser.add_argument("--region", help="BigQuery location for jobs")
    parser.add_argument("--table-filter", help="regex to filter table names")
    parser.add_argument(
        "--transport",
        choices=["stdio", "streamable-http"],
        help="MCP transport (default: streamable-http)",
    )
    parser.add_argument("--host", help="HTTP bind host")
    parser.add_argument("--port", type=int, help="HTTP bind port")
    return parser, parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    parser, args = _parse_args(argv)
    # Settings validators may log; structlog's default factory prints to stdout.
    setup_logging()

    overrides = {
        "gcp_project": args.project,
        "bq_location": args.region,
        "table_filter": args.table_filter,
        "mcp_transport": args.transport,
        "mcp_host": args.host,
        "mcp_port": args.port,
    }
    try:
        settings = Settings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as e:
        parser.error(f"invalid configuration: {e}")
    if not settings.gcp_project or not settings.bq_location:
        parser.error("project and region must be specified")

    setup_logging(settings.log_level)

    provider = live_client_provider(
        location=settings.bq_location,
        query_timeout_seconds=settings.bq_query_timeout_seconds,
    )
    try:
        dispatcher = ToolDispatcher.from_settings(settings, provider)
    except re.error as e:
        parser.error(f"invalid table-filter regex: {e}")

    mcp = build_mcp_server(dispatcher, host=settings.mcp_host, port=settings.mcp_port)
    logger.info(
        "mcp_server_starting",
        transport=settings.mcp_transport,
        project=settings.gcp_project,
        location=settings.bq_location,
        table_filter=settings.table_filter,
        max_bq_query_bytes=settings.max_bq_query_bytes,
    )
    mcp.run(transport=settings.mcp_transport)


if __name__ == "__main__":
    main()
