from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence

from typing_extensions import override

from kv_fallback.errors import WrongTypeError
from kv_fallback.stores.base import BaseStore
from kv_fallback.types import KeyType, Member

SEED_DATA_TYPE = Mapping[str, str | Iterable[Member]]

_LEADING_INTEGER = re.compile(r"\s*([+-]?[0-9]+)")


def parse_counter(value: str | None) -> int:
    """Parse the leading integer of a stored counter, treating anything unparseable as 0."""
    if value is None:
        return 0

    if match := _LEADING_INTEGER.match(value):
        try:
            return int(match.group(1))
        except ValueError:
            # More digits than int() accepts
            return 0

    return 0


class MemoryStore(BaseStore):
    """In-memory key-value store holding string values and sets of strings.

    Used in place of Redis when the server cannot be reached. Values live only as long as the
    store instance: nothing is persisted, nothing is shared between processes, and TTLs set
    through `expire` are accepted but never enforced.

    A key holds either a string or a set, never both. As with Redis, `set` replaces a set stored
    at the key, and the remaining string and set operations raise `WrongTypeError` when run
    against a key holding the other kind of value.
    """

    _strings: dict[str, str]
    _sets: dict[str, set[str]]

    def __init__(self, seed: SEED_DATA_TYPE | None = None) -> None:
        """Initialize the in-memory store.

        Args:
            seed: Optional initial data. String values are stored as strings, any other iterable
                is stored as a set of its members converted to strings.
        """
        self._strings = {}
        self._sets = {}

        for key, value in (seed or {}).items():
            if isinstance(value, str):
                self._strings[key] = value
            else:
                self._sets[key] = {str(member) for member in value}

    def _check_not_set(self, operation: str, key: str) -> None:
        if key in self._sets:
            raise WrongTypeError(operation=operation, key=key, expected="string", actual="set")

    def _check_not_string(self, operation: str, key: str) -> None:
        if key in self._strings:
            raise WrongTypeError(operation=operation, key=key, expected="set", actual="string")

    @override
    async def get(self, key: str) -> str | None:
        self._check_not_set(operation="get", key=key)

        return self._strings.get(key)

    @override
    async def set(self, key: str, value: str) -> None:
        _ = self._sets.pop(key, None)
        self._strings[key] = value

    @override
    async def incr(self, key: str) -> int:
        self._check_not_set(operation="incr", key=key)

        new_value: int = parse_counter(self._strings.get(key)) + 1
        self._strings[key] = str(new_value)

        return new_value

    @override
    async def mget(self, keys: Sequence[str]) -> list[str | None]:
        return [self._strings.get(key) for key in keys]

    @override
    async def keys(self, pattern: str = "*") -> list[str]:
        """List every string key in the store.

        The pattern is accepted for compatibility with Redis but is not applied, and keys holding
        sets are not included.
        """
        return list(self._strings)

    @override
    async def type(self, key: str) -> KeyType:
        if key in self._sets:
            return "set"
        if key in self._strings:
            return "string"
        return "none"

    @override
    async def sadd(self, key: str, members: Iterable[Member]) -> int:
        self._check_not_string(operation="sadd", key=key)

        existing: set[str] = self._sets.setdefault(key, set())

        added: int = 0
        for member in members:
            member_str = str(member)
            if member_str not in existing:
                existing.add(member_str)
                added += 1

        return added

    @override
    async def smembers(self, key: str) -> set[str]:
        self._check_not_string(operation="smembers", key=key)

        return set(self._sets.get(key, ()))

    @override
    async def srem(self, key: str, members: Iterable[Member]) -> int:
        self._check_not_string(operation="srem", key=key)

        if (existing := self._sets.get(key)) is None:
            return 0

        removed: int = 0
        for member in members:
            member_str = str(member)
            if member_str in existing:
                existing.remove(member_str)
                removed += 1

        return removed

    @override
    async def expire(self, key: str, seconds: int) -> None:
        """Accept a TTL for key without enforcing it; entries in this store never expire."""

    @override
    async def ping(self) -> bool:
        return True
