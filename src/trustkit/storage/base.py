from __future__ import annotations

import time
import typing as t
from abc import ABC, abstractmethod
from dataclasses import dataclass


class CacheStore(ABC):
    """Key-value store contract used by the cache-aside accessor.

    Implementations are expected to make each individual call atomic.
    ``ttl_seconds=None`` stores without expiry.
    """

    @abstractmethod
    async def get(self, key: str) -> t.Optional[t.Any]:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def set(self, key: str, value: t.Any, ttl_seconds: t.Optional[float] = None) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def delete(self, key: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def exists(self, key: str) -> bool:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def range_get(self, key: str) -> t.List[t.Any]:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def range_push_all(
        self, key: str, values: t.Sequence[t.Any], ttl_seconds: t.Optional[float] = None
    ) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def flush_all(self) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def is_healthy(self) -> bool:  # pragma: no cover - interface
        raise NotImplementedError


@dataclass
class _Entry:
    value: t.Any
    expires_at: t.Optional[float] = None
    is_list: bool = False


class InMemoryStore(CacheStore):
    """A simple in-memory store for dev/test.

    Entries expire lazily on access. Not intended for production, but
    implements the same async interface.
    """

    def __init__(self) -> None:
        self._entries: t.Dict[str, _Entry] = {}

    def _live(self, key: str) -> t.Optional[_Entry]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at is not None and entry.expires_at <= time.time():
            self._entries.pop(key, None)
            return None
        return entry

    @staticmethod
    def _expiry(ttl_seconds: t.Optional[float]) -> t.Optional[float]:
        if ttl_seconds is None or ttl_seconds <= 0:
            return None
        return time.time() + ttl_seconds

    async def get(self, key: str) -> t.Optional[t.Any]:
        entry = self._live(key)
        if entry is None or entry.is_list:
            return None
        return entry.value

    async def set(self, key: str, value: t.Any, ttl_seconds: t.Optional[float] = None) -> None:
        self._entries[key] = _Entry(value, self._expiry(ttl_seconds))

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def exists(self, key: str) -> bool:
        return self._live(key) is not None

    async def range_get(self, key: str) -> t.List[t.Any]:
        entry = self._live(key)
        if entry is None or not entry.is_list:
            return []
        return list(entry.value)

    async def range_push_all(
        self, key: str, values: t.Sequence[t.Any], ttl_seconds: t.Optional[float] = None
    ) -> None:
        entry = self._live(key)
        existing = list(entry.value) if entry is not None and entry.is_list else []
        existing.extend(values)
        self._entries[key] = _Entry(existing, self._expiry(ttl_seconds), is_list=True)

    async def flush_all(self) -> None:
        self._entries.clear()

    async def is_healthy(self) -> bool:
        return True
