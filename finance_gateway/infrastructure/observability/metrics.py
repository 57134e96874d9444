"""Prometheus metrics for monitoring report generation, ledger reads, and rendering"""

from prometheus_client import Counter, Histogram

# Report metrics
report_counter = Counter(
    "pnl_reports_total",
    "P&L reports requested",
    ["format", "outcome"],  # json | pdf ; success | rejected | failed
)

report_duration_histogram = Histogram(
    "pnl_report_duration_seconds",
    "End-to-end P&L report generation time",
    ["format"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 15.0],
)

# Ledger store metrics
ledger_query_latency_histogram = Histogram(
    "ledger_query_latency_seconds",
    "Ledger store query time by transaction category",
    ["category"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

ledger_query_failures_counter = Counter(
    "ledger_query_failures_total",
    "Failed ledger store queries",
    ["category"],
)

# Document renderer metrics
document_render_failures_counter = Counter(
    "document_render_failures_total",
    "Failed document renders",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_report(report_format: str, outcome: str, duration_seconds: float | None = None) -> None:
    """Record report outcome, and latency for completed attempts"""
    report_counter.labels(format=report_format, outcome=outcome).inc()

    if duration_seconds is not None:
        report_duration_histogram.labels(format=report_format).observe(duration_seconds)
