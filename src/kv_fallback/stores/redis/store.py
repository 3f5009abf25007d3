from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from contextlib import contextmanager
from typing import Any, overload

from typing_extensions import override

from kv_fallback.config import DEFAULT_DB, DEFAULT_HOST, DEFAULT_MAX_RETRIES, DEFAULT_PORT, DEFAULT_SOCKET_TIMEOUT, ConnectionConfig
from kv_fallback.errors import StoreConnectionError, StoreSetupError, WrongTypeError
from kv_fallback.stores.base import BaseStore
from kv_fallback.types import KeyType, Member

try:
    from redis.asyncio import Redis
    from redis.asyncio.retry import Retry
    from redis.backoff import NoBackoff
    from redis.exceptions import ConnectionError as RedisConnectionError
    from redis.exceptions import ResponseError
    from redis.exceptions import TimeoutError as RedisTimeoutError
except ImportError as e:
    msg = "RedisStore requires redis to be installed"
    raise ImportError(msg) from e

KNOWN_KEY_TYPES: tuple[KeyType, ...] = ("set", "string", "none")


@contextmanager
def _translate_errors(operation: str, key: str | None = None, expected: str = "string") -> Iterator[None]:
    """Turn redis-py errors into kv-fallback errors."""
    try:
        yield
    except ResponseError as e:
        if str(e).startswith("WRONGTYPE"):
            raise WrongTypeError(operation=operation, key=key or "", expected=expected) from e
        raise
    except (RedisConnectionError, RedisTimeoutError) as e:
        raise StoreConnectionError(message=f"Failed to run {operation} against Redis: {e}", extra_info={"key": key}) from e


class RedisStore(BaseStore):
    """Redis-based key-value store."""

    _client: Redis
    _client_provided_by_user: bool

    @overload
    def __init__(self, *, client: Redis) -> None: ...

    @overload
    def __init__(self, *, url: str, socket_timeout: float = DEFAULT_SOCKET_TIMEOUT, max_retries: int = DEFAULT_MAX_RETRIES) -> None: ...

    @overload
    def __init__(
        self,
        *,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        db: int = DEFAULT_DB,
        password: str | None = None,
        socket_timeout: float = DEFAULT_SOCKET_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ) -> None: ...

    def __init__(
        self,
        *,
        client: Redis | None = None,
        url: str | None = None,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        db: int = DEFAULT_DB,
        password: str | None = None,
        socket_timeout: float = DEFAULT_SOCKET_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ) -> None:
        """Initialize the Redis store.

        No connection is opened here; the client connects on the first command.

        Args:
            client: An existing Redis client to use. It must be created with decode_responses=True.
            url: Redis URL (e.g., redis://localhost:6379/0).
            host: Redis host. Defaults to localhost.
            port: Redis port. Defaults to 6379.
            db: Redis database number. Defaults to 0.
            password: Redis password. Defaults to None.
            socket_timeout: Seconds to wait when connecting and for each reply. Defaults to 1.0.
            max_retries: Retries per command on connection errors and timeouts. Defaults to 1.
        """
        if client:
            self._client = client
            self._client_provided_by_user = True
            return

        try:
            if url:
                url_config = ConnectionConfig.from_url(url)
                host = url_config.host
                port = url_config.port
                db = url_config.db
                password = url_config.password or password

            self._client = Redis(
                host=host,
                port=port,
                db=db,
                password=password,
                decode_responses=True,
                socket_connect_timeout=socket_timeout,
                socket_timeout=socket_timeout,
                retry=Retry(backoff=NoBackoff(), retries=max_retries),
            )
        except Exception as e:
            raise StoreSetupError(message=f"Failed to create Redis client: {e}", extra_info={"host": host, "port": port, "db": db}) from e

        self._client_provided_by_user = False

    @override
    async def get(self, key: str) -> str | None:
        with _translate_errors(operation="get", key=key):
            return await self._client.get(name=key)  # pyright: ignore[reportAny]

    @override
    async def set(self, key: str, value: str) -> None:
        with _translate_errors(operation="set", key=key):
            _ = await self._client.set(name=key, value=value)  # pyright: ignore[reportAny]

    @override
    async def incr(self, key: str) -> int:
        with _translate_errors(operation="incr", key=key):
            return int(await self._client.incr(name=key))  # pyright: ignore[reportAny]

    @override
    async def mget(self, keys: Sequence[str]) -> list[str | None]:
        if not keys:
            return []

        with _translate_errors(operation="mget"):
            values: list[Any] = await self._client.mget(keys=list(keys))  # pyright: ignore[reportAny]

        return [value if isinstance(value, str) else None for value in values]

    @override
    async def keys(self, pattern: str = "*") -> list[str]:
        with _translate_errors(operation="keys"):
            return list(await self._client.keys(pattern=pattern))  # pyright: ignore[reportUnknownMemberType, reportAny]

    @override
    async def type(self, key: str) -> KeyType:
        with _translate_errors(operation="type", key=key):
            key_type: str = await self._client.type(name=key)  # pyright: ignore[reportAny]

        for known_type in KNOWN_KEY_TYPES:
            if key_type == known_type:
                return known_type

        # Lists, hashes, sorted sets and streams are not part of the store's operations
        raise WrongTypeError(operation="type", key=key, expected="set or string", actual=key_type)

    @override
    async def sadd(self, key: str, members: Iterable[Member]) -> int:
        values: list[str] = [str(member) for member in members]
        if not values:
            return 0

        with _translate_errors(operation="sadd", key=key, expected="set"):
            return int(await self._client.sadd(key, *values))  # pyright: ignore[reportUnknownMemberType, reportAny]

    @override
    async def smembers(self, key: str) -> set[str]:
        with _translate_errors(operation="smembers", key=key, expected="set"):
            return set(await self._client.smembers(name=key))  # pyright: ignore[reportUnknownMemberType, reportAny]

    @override
    async def srem(self, key: str, members: Iterable[Member]) -> int:
        values: list[str] = [str(member) for member in members]
        if not values:
            return 0

        with _translate_errors(operation="srem", key=key, expected="set"):
            return int(await self._client.srem(key, *values))  # pyright: ignore[reportUnknownMemberType, reportAny]

    @override
    async def expire(self, key: str, seconds: int) -> None:
        with _translate_errors(operation="expire", key=key):
            _ = await self._client.expire(name=key, time=seconds)  # pyright: ignore[reportAny]

    @override
    async def ping(self) -> bool:
        with _translate_errors(operation="ping"):
            return bool(await self._client.ping())  # pyright: ignore[reportUnknownMemberType, reportAny]

    @override
    async def close(self) -> None:
        if not self._client_provided_by_user:
            await self._client.aclose()
