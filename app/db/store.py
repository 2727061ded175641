"""
app/db/store.py

Purpose: Store selection and lifecycle

- Builds the configured backend (MongoDB or JSON file)
- Holds the process-wide store opened at startup
- FastAPI dependency handing the store to request handlers
"""

from typing import Optional

from app.core.config import Settings, settings
from app.core.exceptions import StorageError
from app.core.logging import get_logger
from app.db.base import UserStore
from app.db.file_store import JsonFileUserStore
from app.db.mongo import MongoUserStore

logger = get_logger(__name__)

# Global store, opened during application startup
_store: Optional[UserStore] = None


def build_user_store(config: Optional[Settings] = None) -> UserStore:
    """
    Creates (but does not open) the store selected by STORAGE_BACKEND.
    """
    config = config or settings

    if config.STORAGE_BACKEND == "file":
        return JsonFileUserStore(config.DATA_FILE, timeout=config.STORAGE_TIMEOUT_SECONDS)

    return MongoUserStore(
        config.MONGODB_URL,
        config.MONGODB_DB_NAME,
        collection_name=config.MONGODB_COLLECTION,
        timeout=config.STORAGE_TIMEOUT_SECONDS,
    )


async def init_store(store: Optional[UserStore] = None) -> UserStore:
    """
    Opens the store and makes it available to request handlers.
    Called during application startup.
    """
    global _store

    if _store is not None:
        logger.warning("User store already initialized")
        return _store

    store = store or build_user_store()
    logger.info(f"Opening {store.backend_name} user store")
    await store.connect()
    _store = store
    return _store


async def close_store():
    """
    Closes the store.
    Called during application shutdown.
    """
    global _store

    if _store:
        await _store.close()
        _store = None


def get_user_store() -> UserStore:
    """
    FastAPI dependency returning the open store.

    Raises:
        StorageError: If the store was never opened
    """
    if _store is None:
        raise StorageError(
            "Storage not initialized",
            details="Call init_store() during startup."
        )
    return _store


def get_optional_user_store() -> Optional[UserStore]:
    """
    FastAPI dependency for health probes: the open store, or None before startup.
    """
    return _store
