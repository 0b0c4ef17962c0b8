from __future__ import annotations

import logging

from ..metrics.registry import (
    BATCH_INSERT_LATENCY_SECONDS,
    BATCH_INSERT_ROWS_TOTAL,
    BATCH_INSERT_TOTAL,
    STAGING_CLEANUP_FAILURES_TOTAL,
)

logger = logging.getLogger(__name__)


def observe_batch_insert(
    table: str,
    mode: str,
    status: str,
    rows: int,
    latency_s: float,
) -> None:
    """
    Record one batch insert call.

    Metric failures are logged and never propagate into the insert path.
    """
    try:
        BATCH_INSERT_TOTAL.labels(table=table, mode=mode, status=status).inc()
        BATCH_INSERT_LATENCY_SECONDS.labels(table=table, mode=mode).observe(latency_s)
        if status == "success":
            BATCH_INSERT_ROWS_TOTAL.labels(table=table, mode=mode).inc(rows)
    except Exception:
        logger.warning("Failed to record batch insert metrics for %s", table, exc_info=True)


def observe_staging_cleanup_failure(table: str) -> None:
    try:
        STAGING_CLEANUP_FAILURES_TOTAL.labels(table=table).inc()
    except Exception:
        logger.warning("Failed to record staging cleanup metric for %s", table, exc_info=True)
