from .registry import (
    OPERATIONS_QUERY_LATENCY_SECONDS,
    OPERATIONS_QUERY_TOTAL,
)

__all__ = [
    "OPERATIONS_QUERY_TOTAL",
    "OPERATIONS_QUERY_LATENCY_SECONDS",
]
