from prometheus_client import Counter, Histogram

OPERATIONS_QUERY_TOTAL = Counter(
    "clusterops_operations_query_total",
    "Operation directory accessor calls, by outcome",
    ["accessor", "status"],
)

OPERATIONS_QUERY_LATENCY_SECONDS = Histogram(
    "clusterops_operations_query_latency_seconds",
    "Operation directory accessor latency in seconds",
    ["accessor"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)
