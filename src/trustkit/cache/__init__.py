"""Cache-aside access with single-flight recomputation."""

from .aside import CacheAside
from .locks import KeyedLockPool

__all__ = ["CacheAside", "KeyedLockPool"]
