from __future__ import annotations

import inspect
import logging
import time
import typing as t

from trustkit.errors import ArgumentError, NotFoundError
from trustkit.monitoring.metrics import cache_requests_total, supplier_latency_seconds
from trustkit.storage import CacheStore
from trustkit.utils.config import CacheConfig
from trustkit.utils.resilience import CircuitBreaker, with_retries

from .locks import KeyedLockPool

_logger = logging.getLogger(__name__)

T = t.TypeVar("T")
Supplier = t.Callable[[], t.Union[T, t.Awaitable[T]]]


def _require_key(key: str) -> None:
    if not key:
        raise ArgumentError("key cannot be None or empty")


class CacheAside:
    """Cache-aside accessor with single-flight recomputation per key.

    On a miss, callers for the same key queue on one lock; the first one runs
    the supplier and stores its result, the rest find the value on their
    second read.
    """

    def __init__(
        self,
        store: CacheStore,
        config: t.Optional[CacheConfig] = None,
        locks: t.Optional[KeyedLockPool] = None,
        circuit_breaker: t.Optional[CircuitBreaker] = None,
    ) -> None:
        self._store = store
        self._config = config or CacheConfig()
        self._locks = locks or KeyedLockPool()
        if circuit_breaker is None and self._config.circuit_breaker_enabled:
            circuit_breaker = CircuitBreaker()
        self._breaker = circuit_breaker

    @property
    def store(self) -> CacheStore:
        return self._store

    async def _call(self, op: t.Callable[[], t.Awaitable[T]]) -> T:
        def attempt() -> t.Awaitable[T]:
            return with_retries(op, self._config.retry_attempts, self._config.retry_backoff_ms)

        if self._breaker is None:
            return await attempt()
        return await self._breaker.run(attempt)

    # -- plain accessors -------------------------------------------------

    async def get(self, key: str, expected_type: t.Optional[type] = None) -> t.Optional[t.Any]:
        _require_key(key)
        value = await self._call(lambda: self._store.get(key))
        if expected_type is not None and not isinstance(value, expected_type):
            return None
        return value

    async def set(self, key: str, value: t.Any, ttl_seconds: t.Optional[float] = None) -> None:
        _require_key(key)
        await self._call(lambda: self._store.set(key, value, ttl_seconds))

    async def get_list(self, key: str, expected_type: t.Optional[type] = None) -> t.Optional[t.List[t.Any]]:
        _require_key(key)
        values = await self._call(lambda: self._store.range_get(key))
        if not values:
            return None
        if expected_type is not None:
            values = [v for v in values if isinstance(v, expected_type)]
        return values

    async def set_list(self, key: str, values: t.Sequence[t.Any], ttl_seconds: t.Optional[float] = None) -> None:
        _require_key(key)
        if values is None:
            raise ArgumentError("list cannot be None")
        await self.delete(key)
        if not values:
            return
        await self._call(lambda: self._store.range_push_all(key, list(values), ttl_seconds))

    async def delete(self, key: str) -> None:
        _require_key(key)
        await self._call(lambda: self._store.delete(key))

    async def exists(self, key: str) -> bool:
        _require_key(key)
        return await self._call(lambda: self._store.exists(key))

    async def flush_all(self) -> None:
        await self._call(self._store.flush_all)

    # -- single-flight reads ---------------------------------------------

    async def get_or_compute(
        self,
        key: str,
        supplier: Supplier[T],
        ttl_seconds: t.Optional[float] = None,
        expected_type: t.Optional[type] = None,
    ) -> T:
        """Return the cached value for ``key`` or compute, store and return it.

        Raises NotFoundError when the supplier returns None.
        """
        ttl = self._config.default_ttl_seconds if ttl_seconds is None else ttl_seconds
        return await self._get_or_compute(
            key,
            read=lambda: self.get(key, expected_type),
            write=lambda value: self.set(key, value, ttl),
            supplier=supplier,
            is_present=lambda value: value is not None,
        )

    async def get_or_compute_list(
        self,
        key: str,
        supplier: Supplier[t.Sequence[T]],
        ttl_seconds: t.Optional[float] = None,
        expected_type: t.Optional[type] = None,
    ) -> t.List[T]:
        """List-valued variant of :meth:`get_or_compute`; an empty list counts as absent."""
        ttl = self._config.default_ttl_seconds if ttl_seconds is None else ttl_seconds
        result = await self._get_or_compute(
            key,
            read=lambda: self.get_list(key, expected_type),
            write=lambda values: self.set_list(key, values, ttl),
            supplier=supplier,
            is_present=lambda values: bool(values),
        )
        return list(result)

    async def _get_or_compute(
        self,
        key: str,
        read: t.Callable[[], t.Awaitable[t.Any]],
        write: t.Callable[[t.Any], t.Awaitable[None]],
        supplier: Supplier[t.Any],
        is_present: t.Callable[[t.Any], bool],
    ) -> t.Any:
        _require_key(key)
        cached = await read()
        if is_present(cached):
            cache_requests_total.inc(result="hit")
            _logger.debug("cache hit for %s", key)
            return cached

        async with self._locks.hold(key):
            # another caller may have populated the key while we waited
            cached = await read()
            if is_present(cached):
                cache_requests_total.inc(result="raced")
                _logger.debug("cache populated concurrently for %s", key)
                return cached

            started = time.perf_counter()
            result = supplier()
            if inspect.isawaitable(result):
                result = await result
            supplier_latency_seconds.observe(time.perf_counter() - started)

            if not is_present(result):
                cache_requests_total.inc(result="not_found")
                raise NotFoundError(f"Data not found for key: {key}", {"key": key})

            await write(result)
            cache_requests_total.inc(result="computed")
            _logger.info("cache populated for %s", key)
            return result
