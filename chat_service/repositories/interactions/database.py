"""
Database configuration module.

Sets up the MongoDB client and exposes the collection names that make up the
persisted contract of the service.

Exports:
    - get_client: Process-wide MongoDB client (owns the connection pool).
    - get_database: The service database handle.
    - CHAT_COLLECTION, CHATS_USERS_COLLECTION, USER_COLLECTION: Collection names.
"""

from functools import lru_cache

from pymongo import MongoClient
from pymongo.database import Database

from chat_service.configs import get_settings

CHAT_COLLECTION = "chat"
CHATS_USERS_COLLECTION = "chats_users"
USER_COLLECTION = "user"


@lru_cache()
def get_client() -> MongoClient:  # type: ignore[type-arg]
    """Create the MongoDB client once per process."""
    settings = get_settings()
    if settings.MONGODB_TIMEOUT_MS is not None:
        return MongoClient(settings.MONGODB_URL, timeoutMS=settings.MONGODB_TIMEOUT_MS)
    return MongoClient(settings.MONGODB_URL)


def get_database() -> Database:  # type: ignore[type-arg]
    """Return the configured service database."""
    return get_client()[get_settings().MONGODB_DATABASE]
