"""Scan-budget guard for query execution.

When a budget is configured the dispatcher dry-runs the exact SQL first and
calls enforce_scan_budget() with the estimate. The dry-run estimate is
treated as authoritative for the decision, even though the real scan may
differ (caching, partition pruning).
"""

from typing import Any

from bq_mcp_server.errors import BackendError, GuardRejection
from bq_mcp_server.logging_config import get_logger
from bq_mcp_server.types import CostEstimate

logger = get_logger(__name__)


def parse_scan_budget(raw: Any) -> int | None:
    """Parse a configured scan budget.

    Returns a positive int, or None when the guard should be inert
    (unset, empty, non-numeric, or <= 0).
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        budget = raw
    else:
        try:
            budget = int(str(raw).strip())
        except ValueError:
            logger.warning("scan_budget_invalid", value=str(raw)[:50])
            return None
    return budget if budget > 0 else None


def enforce_scan_budget(estimate: CostEstimate, max_bytes: int | None) -> None:
    """Reject the query if its estimate exceeds the budget.

    Args:
        estimate: Dry-run statistics for the exact SQL about to run.
        max_bytes: Budget from parse_scan_budget(); None disables the check.

    Raises:
        BackendError: If the estimate carries no byte count.
        GuardRejection: If estimated bytes > max_bytes.
    """
    if max_bytes is None:
        return
    if estimate.get("total_bytes_processed") is None:
        raise BackendError("dry run returned no query statistics")
    estimated = int(estimate["total_bytes_processed"])
    if estimated > max_bytes:
        logger.warning(
            "query_guard_rejected",
            estimated_bytes=estimated,
            max_bytes=max_bytes,
        )
        raise GuardRejection(estimated, max_bytes)
    logger.info(
        "query_guard_passed",
        estimated_bytes=estimated,
        max_bytes=max_bytes,
    )
