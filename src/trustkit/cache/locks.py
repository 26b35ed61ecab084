from __future__ import annotations

import asyncio
import typing as t
from contextlib import asynccontextmanager
from dataclasses import dataclass, field


@dataclass
class _Slot:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    holders: int = 0


class KeyedLockPool:
    """One asyncio lock per cache key, kept only while someone uses it.

    A slot is created on first use and dropped when its last holder or waiter
    leaves, so the pool holds entries only for keys currently being computed.
    Distinct keys never share a lock.
    """

    def __init__(self) -> None:
        self._slots: t.Dict[str, _Slot] = {}

    def __len__(self) -> int:
        return len(self._slots)

    def __contains__(self, key: object) -> bool:
        return key in self._slots

    @asynccontextmanager
    async def hold(self, key: str) -> t.AsyncIterator[None]:
        slot = self._slots.get(key)
        if slot is None:
            slot = self._slots[key] = _Slot()
        slot.holders += 1
        try:
            async with slot.lock:
                yield
        finally:
            slot.holders -= 1
            if slot.holders == 0:
                del self._slots[key]
