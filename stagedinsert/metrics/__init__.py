from .registry import (
    BATCH_INSERT_LATENCY_SECONDS,
    BATCH_INSERT_ROWS_TOTAL,
    BATCH_INSERT_TOTAL,
    STAGING_CLEANUP_FAILURES_TOTAL,
)

__all__ = [
    "BATCH_INSERT_TOTAL",
    "BATCH_INSERT_ROWS_TOTAL",
    "BATCH_INSERT_LATENCY_SECONDS",
    "STAGING_CLEANUP_FAILURES_TOTAL",
]
