"""
Metrics definitions for safety-core.

This module defines Prometheus metrics for monitoring
guardian ranking and danger-zone clustering.
"""

from prometheus_client import Counter, Histogram, Gauge

# 카운터 메트릭
guardians_ranked = Counter(
    "guardians_ranked_total",
    "Number of guardians that passed the distance gate and were scored"
)

guardians_excluded = Counter(
    "guardians_excluded_total",
    "Number of guardians excluded before scoring",
    ["reason"]
)

history_lookup_failures = Counter(
    "guardian_history_lookup_failures_total",
    "Alert-history lookups that failed and fell back to the neutral score",
    ["kind"]
)

danger_zone_clusters = Counter(
    "danger_zone_clusters_total",
    "Number of danger-zone clusters produced",
    ["level"]
)

# 히스토그램 메트릭
ranking_seconds = Histogram(
    "guardian_ranking_duration_seconds",
    "Time spent ranking guardians for one incident",
    buckets=[0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0]
)

clustering_seconds = Histogram(
    "danger_zone_clustering_duration_seconds",
    "Time spent clustering and scoring reports",
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0]
)

# 게이지 메트릭
uptime_seconds = Gauge(
    "uptime_seconds",
    "Service uptime in seconds"
)
