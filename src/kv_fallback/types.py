from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Literal, Protocol, runtime_checkable

KeyType = Literal["set", "string", "none"]

Member = str | int | float


@runtime_checkable
class Store(Protocol):
    """Protocol defining the operations the application runs against its key-value store.

    Missing keys never raise: reads return None, an empty set, or zero.
    """

    async def get(self, key: str) -> str | None:
        """Retrieve the string value stored at key, or None if the key does not exist."""
        ...

    async def set(self, key: str, value: str) -> None:
        """Store a string value at key, replacing whatever was there."""
        ...

    async def incr(self, key: str) -> int:
        """Increment the counter stored at key and return the new value."""
        ...

    async def mget(self, keys: Sequence[str]) -> list[str | None]:
        """Retrieve the values for several keys, in the order they were requested."""
        ...

    async def keys(self, pattern: str = "*") -> list[str]:
        """List the keys known to the store."""
        ...

    async def type(self, key: str) -> KeyType:
        """Report whether key holds a set, a string, or nothing."""
        ...

    async def sadd(self, key: str, members: Iterable[Member]) -> int:
        """Add members to the set stored at key, returning how many were new."""
        ...

    async def smembers(self, key: str) -> set[str]:
        """Return every member of the set stored at key."""
        ...

    async def srem(self, key: str, members: Iterable[Member]) -> int:
        """Remove members from the set stored at key, returning how many were removed."""
        ...

    async def expire(self, key: str, seconds: int) -> None:
        """Set a time to live on key."""
        ...

    async def ping(self) -> bool:
        """Check that the store is reachable."""
        ...

    async def close(self) -> None:
        """Release any resources held by the store."""
        ...
