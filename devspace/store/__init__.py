"""Local store: persisted engineers, tasks and the repository binding."""

from devspace.config import Settings
from devspace.errors import StorageUnavailable

from .base import (
    COLLECTIONS,
    CONNECTION_RECORD_ID,
    ENGINEERS,
    GITHUB_CONNECTION,
    TASKS,
    LocalStore,
    Record,
)
from .file import JsonFileStore
from .redis import RedisStore


def open_store(settings: Settings) -> LocalStore:
    """Build the store backend selected by ``settings.store_backend``."""
    if settings.store_backend == "redis":
        if not settings.redis_url:
            raise StorageUnavailable("STORE_BACKEND=redis requires REDIS_URL to be set")
        return RedisStore.from_url(settings.redis_url)
    return JsonFileStore(settings.data_dir)


__all__ = [
    "COLLECTIONS",
    "CONNECTION_RECORD_ID",
    "ENGINEERS",
    "GITHUB_CONNECTION",
    "TASKS",
    "JsonFileStore",
    "LocalStore",
    "Record",
    "RedisStore",
    "open_store",
]
