"""JSON serialization for BigQuery results.

BigQuery rows (via pandas DataFrames) contain types that are not
JSON-serializable: pd.Timestamp, datetime.date, Decimal, NaT, numpy
integers, numpy arrays for REPEATED columns, etc.

sanitize_value() converts them to JSON-safe equivalents; to_json_payload()
produces the single text payload a tool invocation returns.
"""

import base64
import json
import math
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

import numpy as np
import pandas as pd

from bq_mcp_server.errors import SerializationError


def sanitize_value(val: Any) -> Any:
    """Convert a single value to a JSON-safe type."""
    if val is None:
        return None
    # REPEATED columns arrive as ndarrays; pd.isna() on them is element-wise
    if isinstance(val, np.ndarray):
        return [sanitize_value(v) for v in val.tolist()]
    # NaT/NA check first: pd.NaT is a datetime instance
    if not isinstance(val, str | bytes | dict | list | tuple):
        try:
            if pd.isna(val):
                return None
        except (TypeError, ValueError):
            pass
    # pd.Timestamp before datetime (Timestamp is a datetime subclass)
    if isinstance(val, pd.Timestamp):
        return val.isoformat()
    if isinstance(val, datetime | date | time):
        return val.isoformat()
    if isinstance(val, Decimal):
        return float(val)
    if isinstance(val, bytes):
        return base64.b64encode(val).decode("ascii")
    if isinstance(val, float) and math.isinf(val):
        return str(val)
    if isinstance(val, np.integer):
        return int(val)
    if isinstance(val, np.floating):
        return sanitize_value(float(val))
    if isinstance(val, np.bool_):
        return bool(val)
    # STRUCT columns and nested arrays
    if isinstance(val, dict):
        return {str(k): sanitize_value(v) for k, v in val.items()}
    if isinstance(val, list | tuple):
        return [sanitize_value(v) for v in val]
    try:
        json.dumps(val)
        return val
    except (TypeError, ValueError, OverflowError):
        return str(val)


def sanitize_row(row: dict[str, Any]) -> dict[str, Any]:
    """Sanitize all values in a row dict for JSON serialization."""
    return {k: sanitize_value(v) for k, v in row.items()}


def sanitize_rows(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Sanitize a list of row dicts."""
    return [sanitize_row(r) for r in rows]


def to_json_payload(result: Any) -> str:
    """Encode a shaped result as the tool's text payload.

    Raises:
        SerializationError: If the result cannot be encoded. Backend results
            are sanitized first, so this indicates a bug.
    """
    try:
        return json.dumps(sanitize_value(result), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"failed to encode result: {e}") from e
