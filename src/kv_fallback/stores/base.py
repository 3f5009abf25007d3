"""
Base abstract class for key-value store implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from types import TracebackType

from typing_extensions import Self

from kv_fallback.types import KeyType, Member


class BaseStore(ABC):
    """Abstract base class for key-value store implementations.

    When using this ABC, your implementation will:
    1. Implement the string operations: `get`, `set`, `incr`, `mget` and `keys`
    2. Implement the set operations: `sadd`, `smembers` and `srem`
    3. Report key types through `type` and accept TTLs through `expire`
    4. Return None, an empty set or zero for keys that do not exist instead of raising
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Retrieve the string value stored at key, or None if the key does not exist."""
        ...

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store a string value at key, replacing whatever was there."""
        ...

    @abstractmethod
    async def incr(self, key: str) -> int:
        """Increment the counter stored at key and return the new value."""
        ...

    @abstractmethod
    async def mget(self, keys: Sequence[str]) -> list[str | None]:
        """Retrieve the values for several keys, in the order they were requested."""
        ...

    @abstractmethod
    async def keys(self, pattern: str = "*") -> list[str]:
        """List the keys known to the store."""
        ...

    @abstractmethod
    async def type(self, key: str) -> KeyType:
        """Report whether key holds a set, a string, or nothing."""
        ...

    @abstractmethod
    async def sadd(self, key: str, members: Iterable[Member]) -> int:
        """Add members to the set stored at key, returning how many were new."""
        ...

    @abstractmethod
    async def smembers(self, key: str) -> set[str]:
        """Return every member of the set stored at key."""
        ...

    @abstractmethod
    async def srem(self, key: str, members: Iterable[Member]) -> int:
        """Remove members from the set stored at key, returning how many were removed."""
        ...

    @abstractmethod
    async def expire(self, key: str, seconds: int) -> None:
        """Set a time to live on key."""
        ...

    @abstractmethod
    async def ping(self) -> bool:
        """Check that the store is reachable."""
        ...

    async def close(self) -> None:
        """Release any resources held by the store."""

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self, exc_type: type[BaseException] | None, exc_value: BaseException | None, traceback: TracebackType | None
    ) -> None:
        await self.close()
