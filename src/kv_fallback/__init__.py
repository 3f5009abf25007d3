"""kv-fallback - A Redis-backed key-value store that falls back to memory when Redis is unavailable."""

from kv_fallback.config import ConnectionConfig
from kv_fallback.errors import (
    ConfigurationError,
    KVFallbackError,
    KVOperationError,
    KVStoreError,
    StoreConnectionError,
    StoreSetupError,
    WrongTypeError,
)
from kv_fallback.handle import StoreHandle, resolve_store
from kv_fallback.stores.base import BaseStore
from kv_fallback.stores.memory import MemoryStore
from kv_fallback.types import KeyType, Store


def __getattr__(name: str):
    """Lazy import for the Redis store."""
    if name == "RedisStore":
        try:
            from kv_fallback.stores.redis import RedisStore
        except ImportError as e:
            raise ImportError(f"RedisStore requires redis to be installed: {e}") from e
        return RedisStore

    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


__all__ = [
    "BaseStore",
    "ConfigurationError",
    "ConnectionConfig",
    "KVFallbackError",
    "KVOperationError",
    "KVStoreError",
    "KeyType",
    "MemoryStore",
    "RedisStore",
    "Store",
    "StoreConnectionError",
    "StoreHandle",
    "StoreSetupError",
    "WrongTypeError",
    "resolve_store",
]
