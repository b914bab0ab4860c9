"""Shared TypedDict definitions for backend results.

Both the live client and the test fakes return dicts matching these shapes,
so the dispatcher can serialize them without knowing which client ran.
"""

from __future__ import annotations

from typing import TypedDict


class SchemaField(TypedDict, total=False):
    """One column of a table schema.

    `fields` is only present for RECORD/STRUCT columns.
    """

    name: str
    type: str
    mode: str
    description: str
    fields: list[SchemaField]


class CostEstimate(TypedDict):
    """Statistics reported by a dry run. Never reused across queries."""

    total_bytes_processed: int
    statement_type: str | None
    referenced_tables: list[str]
