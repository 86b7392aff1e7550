"""Prometheus metrics for the notes client.

All metric objects are defined here so they can be imported from any module.
"""

from prometheus_client import Counter, Gauge

# ---------------------------------------------------------------------------
# Session metrics
# ---------------------------------------------------------------------------

AUTH_OPERATIONS = Counter(
    "notes_auth_operations_total",
    "Total sign-up / sign-in / sign-out requests",
    ["operation", "status"],
)

# ---------------------------------------------------------------------------
# Document store metrics
# ---------------------------------------------------------------------------

STORE_WRITES = Counter(
    "notes_store_writes_total",
    "Total create / update / delete requests sent to the store",
    ["operation", "status"],
)

SKIPPED_WRITES = Counter(
    "notes_skipped_writes_total",
    "Update / delete calls ignored because the note was never persisted",
    ["operation"],
)

SNAPSHOT_DELIVERIES = Counter(
    "notes_snapshot_deliveries_total",
    "Snapshots received from the live subscription",
    ["status"],  # ok, error
)

DROPPED_DOCUMENTS = Counter(
    "notes_dropped_documents_total",
    "Documents left out of a snapshot because they did not map to a note",
)

LISTED_NOTES = Gauge(
    "notes_listed",
    "Number of notes in the most recent snapshot",
)
