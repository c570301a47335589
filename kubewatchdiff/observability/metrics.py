"""Prometheus metrics for watch sessions."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

iterations_total = Counter(
    "kubewatchdiff_iterations_total",
    "Poll iterations completed, labelled by whether any diff was rendered",
    ["changed"],
)

diffs_rendered_total = Counter(
    "kubewatchdiff_diffs_rendered_total",
    "Non-empty per-resource diff reports rendered",
    ["kind"],
)

list_failures_total = Counter(
    "kubewatchdiff_list_failures_total",
    "Resource listing calls that failed and aborted a watch",
    ["kind"],
)

list_duration_seconds = Histogram(
    "kubewatchdiff_list_duration_seconds",
    "Latency of resource listing calls",
    ["kind"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)
