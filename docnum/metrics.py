# docnum/metrics.py
from prometheus_client import Counter, Histogram

# --- Counters ---
# Issued document numbers, labelled by document type key
DOCUMENTS_GENERATED_TOTAL = Counter(
    "sintel_documents_generated_total",
    "Total number of generated documents",
    ["document_type"],
)

DOCUMENTS_DELETED_TOTAL = Counter(
    "sintel_documents_deleted_total",
    "Total number of deleted documents",
)

# scope is "one" for a single counter reset, "all" for bulk resets
COUNTER_RESETS_TOTAL = Counter(
    "sintel_counter_resets_total",
    "Total number of counter resets",
    ["scope"],
)

# --- Histograms ---
ALLOCATION_DURATION_SECONDS = Histogram(
    "sintel_allocation_duration_seconds",
    "Time spent in the allocate-and-insert transaction",
)
