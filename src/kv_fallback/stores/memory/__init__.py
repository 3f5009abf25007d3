from kv_fallback.stores.memory.store import MemoryStore

__all__ = ["MemoryStore"]
