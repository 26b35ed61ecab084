from trustkit.errors import ConfigurationError
from trustkit.utils.config import StoreConfig

from .base import CacheStore, InMemoryStore
from .redis_adapter import RedisStore


def build_store(config: StoreConfig) -> CacheStore:
    if config.type == "memory":
        return InMemoryStore()
    if config.type == "redis":
        return RedisStore(config.url or "redis://localhost:6379/0", prefix=config.prefix)
    raise ConfigurationError(f"unknown store type {config.type!r}", {"type": config.type})


__all__ = ["CacheStore", "InMemoryStore", "RedisStore", "build_store"]
