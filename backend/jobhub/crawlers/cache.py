from __future__ import annotations
import logging
from typing import Any, Callable, Protocol

logger = logging.getLogger(__name__)


class ResponseCache(Protocol):
    def get_cached(self, key: str) -> Any | None:
        ...

    def set_cached(self, key: str, value: Any, ttl_ms: int) -> None:
        ...


def cached_request(cache: ResponseCache, key: str, producer: Callable[[], Any], ttl_ms: int) -> Any:
    """Return the cached value for ``key``, or produce, store and return it."""
    cached = cache.get_cached(key)
    if cached is not None:
        logger.debug(f"cache hit {key}")
        return cached

    data = producer()
    cache.set_cached(key, data, ttl_ms)
    return data
