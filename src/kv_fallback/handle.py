from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Iterable, Sequence

from typing_extensions import Self, override

from kv_fallback.config import ConnectionConfig
from kv_fallback.stores.base import BaseStore
from kv_fallback.stores.memory import MemoryStore
from kv_fallback.types import KeyType, Member

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT = 1.0


async def _discard(store: BaseStore) -> None:
    with contextlib.suppress(Exception):
        await store.close()


async def resolve_store(config: ConnectionConfig, *, probe_timeout: float = DEFAULT_PROBE_TIMEOUT) -> BaseStore:
    """Connect to Redis, or fall back to an in-memory store if Redis cannot be used.

    The Redis client is pinged before this returns, so callers only ever see a store that
    answered or the in-memory fallback. Falling back is final: Redis is not probed again.

    Args:
        config: The Redis connection settings.
        probe_timeout: Seconds to wait for the ping. Defaults to 1.0.

    Returns:
        A RedisStore if the server answered the ping, otherwise a new MemoryStore.
    """
    try:
        from kv_fallback.stores.redis import RedisStore

        store: BaseStore = RedisStore(
            host=config.host,
            port=config.port,
            db=config.db,
            password=config.password,
            socket_timeout=config.socket_timeout,
            max_retries=config.max_retries,
        )
    except Exception as e:
        logger.warning(f"Redis initialization failed for {config.endpoint}, using in-memory fallback store", exc_info=e)
        return MemoryStore()

    try:
        reachable: bool = await asyncio.wait_for(store.ping(), timeout=probe_timeout)
    except Exception as e:
        logger.warning(f"Redis connection failed for {config.endpoint}, using in-memory fallback store", exc_info=e)
        await _discard(store)
        return MemoryStore()

    if not reachable:
        logger.warning(f"Redis connection failed for {config.endpoint}, using in-memory fallback store")
        await _discard(store)
        return MemoryStore()

    logger.info(f"Connected to Redis at {config.endpoint}")
    return store


class StoreHandle(BaseStore):
    """The store the application talks to, resolved once at startup.

    Create one with `StoreHandle.resolve` and pass it to whatever needs the store. Every
    operation is forwarded to the bound store, which never changes after construction.

    Note that when the handle is bound to the in-memory fallback, data is local to this
    process: it is not shared with other instances of the application and is lost on restart.

    Example:
        async with await StoreHandle.resolve(ConnectionConfig.from_env()) as store:
            await store.set(key="greeting", value="hello")
    """

    def __init__(self, store: BaseStore) -> None:
        self._store: BaseStore = store

    @classmethod
    async def resolve(cls, config: ConnectionConfig, *, probe_timeout: float = DEFAULT_PROBE_TIMEOUT) -> Self:
        return cls(store=await resolve_store(config=config, probe_timeout=probe_timeout))

    @property
    def store(self) -> BaseStore:
        return self._store

    @property
    def is_fallback(self) -> bool:
        """Whether the handle is bound to the in-memory fallback store."""
        return isinstance(self._store, MemoryStore)

    @override
    async def get(self, key: str) -> str | None:
        return await self._store.get(key=key)

    @override
    async def set(self, key: str, value: str) -> None:
        return await self._store.set(key=key, value=value)

    @override
    async def incr(self, key: str) -> int:
        return await self._store.incr(key=key)

    @override
    async def mget(self, keys: Sequence[str]) -> list[str | None]:
        return await self._store.mget(keys=keys)

    @override
    async def keys(self, pattern: str = "*") -> list[str]:
        return await self._store.keys(pattern=pattern)

    @override
    async def type(self, key: str) -> KeyType:
        return await self._store.type(key=key)

    @override
    async def sadd(self, key: str, members: Iterable[Member]) -> int:
        return await self._store.sadd(key=key, members=members)

    @override
    async def smembers(self, key: str) -> set[str]:
        return await self._store.smembers(key=key)

    @override
    async def srem(self, key: str, members: Iterable[Member]) -> int:
        return await self._store.srem(key=key, members=members)

    @override
    async def expire(self, key: str, seconds: int) -> None:
        return await self._store.expire(key=key, seconds=seconds)

    @override
    async def ping(self) -> bool:
        return await self._store.ping()

    @override
    async def close(self) -> None:
        await self._store.close()
