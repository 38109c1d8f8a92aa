"""In-memory aiocache для редко меняющихся данных (платформенные настройки)."""

from __future__ import annotations

from typing import Any, Awaitable, Callable

from aiocache import SimpleMemoryCache, caches
from aiocache.base import BaseCache
from loguru import logger

from config.settings import get_settings

NAMESPACE = "refpoints"

_configured = False


def configure_cache() -> None:
    """Регистрирует алиас ``default``; повторный вызов ничего не делает."""

    global _configured
    if _configured:
        return
    caches.set_config(
        {
            "default": {
                "cache": SimpleMemoryCache,
                "namespace": NAMESPACE,
                "ttl": get_settings().cache.ttl_seconds,
            }
        }
    )
    _configured = True


def get_cache(alias: str = "default") -> BaseCache:
    configure_cache()
    return caches.get(alias)


async def cached_call(key: str, ttl: int | None, factory: Callable[[], Awaitable[Any]]) -> Any:
    """Значение из кеша, иначе результат ``factory`` (None не кешируется)."""

    cache = get_cache()
    value = await cache.get(key)
    if value is None:
        value = await factory()
        if value is not None:
            await cache.set(key, value, ttl=ttl)
    return value


async def invalidate(key: str) -> None:
    if await get_cache().delete(key):
        logger.debug("Кеш {key} сброшен", key=key)


__all__ = ["NAMESPACE", "cached_call", "configure_cache", "get_cache", "invalidate"]
