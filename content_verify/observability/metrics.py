"""
Prometheus metrics collection for content-verify-log

This module provides metrics instrumentation for monitoring record
outcomes, patch outcomes and batch performance.
"""
import os
from typing import Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

from content_verify.core.models import ProcessedContent

# Global registry for metrics
REGISTRY = CollectorRegistry()


# =======================
# RECORD METRICS
# =======================

# Processed records by schema and reason kind ("none" when no reason)
records_processed_total = Counter(
    name="content_records_processed_total",
    documentation="Total number of records processed",
    labelnames=["variant", "reason_kind"],
    registry=REGISTRY,
)

# Correction items by outcome; fallback matches are counted apart from positional ones
patches_total = Counter(
    name="content_patches_total",
    documentation="Total number of correction items by outcome",
    labelnames=["variant", "outcome"],
    registry=REGISTRY,
)


# =======================
# BATCH METRICS
# =======================

batches_total = Counter(
    name="content_batches_total",
    documentation="Total number of pages/batches handled",
    labelnames=["status"],  # status: success, write_failed
    registry=REGISTRY,
)

write_failures_total = Counter(
    name="content_write_failures_total",
    documentation="Records that could not be written to the destination table",
    labelnames=["table"],
    registry=REGISTRY,
)

batch_duration_seconds = Histogram(
    name="content_batch_duration_seconds",
    documentation="Time spent processing and writing one batch",
    labelnames=["mode"],  # mode: migrate, spark
    buckets=[0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
    registry=REGISTRY,
)


# =======================
# HELPER FUNCTIONS
# =======================

def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics in text format

    Returns:
        Metrics in Prometheus text format
    """
    return generate_latest(REGISTRY)


def get_content_type() -> str:
    return CONTENT_TYPE_LATEST


def start_metrics_server(port: Optional[int] = None) -> None:
    """
    Start HTTP server for Prometheus metrics

    Args:
        port: Port to listen on (defaults to env var METRICS_PORT or 8000)
    """
    # Only bind a port when the endpoint is actually requested
    from prometheus_client import start_http_server

    metrics_port = port or int(os.getenv("METRICS_PORT", "8000"))
    start_http_server(metrics_port, registry=REGISTRY)


def record_processed_content(result: ProcessedContent) -> None:
    """
    Count one processed record and its patch outcomes.

    Args:
        result: Processor output
    """
    reason_kind = result.reason_kind.value if result.reason_kind else "none"
    records_processed_total.labels(variant=result.variant.value, reason_kind=reason_kind).inc()

    if result.patch_report:
        for outcome, count in result.patch_report.summary().items():
            patches_total.labels(variant=result.variant.value, outcome=outcome).inc(count)


def record_batch(mode: str, duration_seconds: float, write_failed: int = 0, table: str = "processed_content") -> None:
    """
    Record one batch.

    Args:
        mode: "migrate" or "spark"
        duration_seconds: Processing plus write time
        write_failed: Records of this batch that were not written
        table: Destination table name
    """
    batch_duration_seconds.labels(mode=mode).observe(duration_seconds)
    if write_failed:
        batches_total.labels(status="write_failed").inc()
        write_failures_total.labels(table=table).inc(write_failed)
    else:
        batches_total.labels(status="success").inc()
