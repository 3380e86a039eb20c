"""
Centralized Prometheus metrics definitions for the Chess Coach application.

This module uses the prometheus-client library to define all metrics that the
application records. Grouping them here provides a single, clear overview of
the application's instrumentation points.
"""
from prometheus_client import Counter, Histogram

# A common prefix for all application-specific metrics.
PREFIX = "chess_coach"

# --- Board Interaction Metrics ---

MOVES_APPLIED_TOTAL = Counter(
    f"{PREFIX}_moves_applied_total",
    "Total number of moves accepted by the rules engine.",
)

MOVES_REJECTED_TOTAL = Counter(
    f"{PREFIX}_moves_rejected_total",
    "Total number of attempted moves that were rejected.",
    ["reason"],  # e.g., reason="illegal", "game_over"
)

FEEDBACK_EVENTS_TOTAL = Counter(
    f"{PREFIX}_feedback_events_total",
    "Total number of feedback cues emitted, by event type.",
    ["event"],  # e.g., event="move", "capture", "check", "start", "end"
)

# --- AI Coach Metrics ---

ADVISORY_REQUESTS_TOTAL = Counter(
    f"{PREFIX}_advisory_requests_total",
    "Total number of coach requests, by outcome.",
    ["outcome"],  # e.g., outcome="ok", "empty", "unavailable", "stale"
)

ADVISORY_DURATION_SECONDS = Histogram(
    f"{PREFIX}_advisory_duration_seconds",
    "Histogram of the time taken for the coach to answer a request.",
    buckets=(0.5, 1, 2, 5, 10, 20, 30, 60, float("inf"))
)

ADVISORY_TRANSIENT_ERRORS_TOTAL = Counter(
    f"{PREFIX}_advisory_transient_errors_total",
    "Total number of transient coach errors that triggered a retry.",
    ["service"]  # e.g., service="gemini"
)
