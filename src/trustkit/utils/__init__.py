"""Utility module for configuration, TTL expressions and resilience patterns."""

from .config import CacheConfig, StoreConfig, TokenConfig, ToolkitConfig
from .expression import evaluate
from .resilience import CircuitBreaker, CircuitBreakerConfig, CircuitState, with_retries

__all__ = [
    "CacheConfig",
    "StoreConfig",
    "TokenConfig",
    "ToolkitConfig",
    "evaluate",
    "CircuitBreaker",
    "CircuitBreakerConfig",
    "CircuitState",
    "with_retries",
]
