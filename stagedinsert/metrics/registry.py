from prometheus_client import Counter, Histogram

BATCH_INSERT_TOTAL = Counter(
    "stagedinsert_batch_insert_total",
    "Batch insert calls by table, mode (plain|staged) and outcome",
    ["table", "mode", "status"],
)

BATCH_INSERT_ROWS_TOTAL = Counter(
    "stagedinsert_batch_insert_rows_total",
    "Rows written by successful batch insert calls",
    ["table", "mode"],
)

BATCH_INSERT_LATENCY_SECONDS = Histogram(
    "stagedinsert_batch_insert_latency_seconds",
    "Wall-clock duration of batch insert calls, transaction included",
    ["table", "mode"],
)

STAGING_CLEANUP_FAILURES_TOTAL = Counter(
    "stagedinsert_staging_cleanup_failures_total",
    "Staging tables whose drop failed while another error was propagating",
    ["table"],
)
