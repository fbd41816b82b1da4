import logging
from typing import Optional

from collab_chat.core.config import Settings, settings as default_settings
from .base import KeyValueStore
from .memory import InMemoryStore
from .redis import RedisStore

logger = logging.getLogger(__name__)


async def init_store(config: Optional[Settings] = None) -> KeyValueStore:
    """Initialize the configured key-value store backend"""
    config = config or default_settings
    try:
        if config.store_backend == "memory":
            store = InMemoryStore()
        else:
            store = await RedisStore.connect(config)

        logger.info(f"Key-value store initialized: {config.store_backend}")
        return store
    except Exception as e:
        logger.error(f"Store initialization failed: {e}")
        raise


async def close_store(store: KeyValueStore):
    """Close the key-value store connection"""
    try:
        await store.close()
        logger.info("Key-value store closed")
    except Exception as e:
        logger.error(f"Error closing key-value store: {e}")


__all__ = [
    "KeyValueStore",
    "InMemoryStore",
    "RedisStore",
    "init_store",
    "close_store",
]
