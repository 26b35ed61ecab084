from .metrics import Counter, Histogram, cache_requests_total, supplier_latency_seconds, token_operations_total

__all__ = [
    "Counter",
    "Histogram",
    "cache_requests_total",
    "supplier_latency_seconds",
    "token_operations_total",
]
