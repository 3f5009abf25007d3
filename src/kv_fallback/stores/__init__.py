from kv_fallback.stores.base import BaseStore
from kv_fallback.stores.memory import MemoryStore

__all__ = ["BaseStore", "MemoryStore"]
