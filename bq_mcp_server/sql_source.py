"""Load SQL text for the queryfile and dryrunfile tools."""

from pathlib import Path

from bq_mcp_server.errors import SourceReadError
from bq_mcp_server.logging_config import get_logger

logger = get_logger(__name__)


def read_sql_file(path: str) -> str:
    """Read a SQL file as UTF-8 and return its text unchanged.

    Raises:
        SourceReadError: If the path is empty, missing, a directory,
            unreadable, or not valid UTF-8.
    """
    if not path:
        raise SourceReadError("path is required")
    try:
        sql = Path(path).expanduser().read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("sql_file_read_error", path=path, error=str(e))
        raise SourceReadError(f"cannot read SQL file {path}: {e}") from e
    logger.info("sql_file_loaded", path=path, chars=len(sql))
    return sql
