from kv_fallback.stores.redis.store import RedisStore

__all__ = ["RedisStore"]
