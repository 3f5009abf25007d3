import logging
import os

import pytest
from redis import Redis

from kv_fallback.stores.memory import MemoryStore

logger = logging.getLogger(__name__)

REDIS_HOST = "localhost"
REDIS_PORT = 6379
REDIS_DB = 15  # Use a separate database for tests

# Nothing listens here, so connecting is refused immediately
UNREACHABLE_PORT = 1


def redis_is_running() -> bool:
    client: Redis = Redis(host=REDIS_HOST, port=REDIS_PORT, db=REDIS_DB, socket_connect_timeout=0.5, socket_timeout=0.5)
    try:
        return bool(client.ping())  # pyright: ignore[reportUnknownMemberType]
    except Exception:
        logger.info(f"Redis is not running on {REDIS_HOST}:{REDIS_PORT}")
        return False
    finally:
        client.close()


def should_skip_redis_tests() -> bool:
    if os.getenv("SKIP_REDIS_TESTS", "").lower() in ("1", "true"):
        return True

    return not redis_is_running()


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()
