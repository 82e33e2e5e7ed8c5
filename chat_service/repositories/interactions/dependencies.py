"""
Database dependency.

Provides the MongoDB database handle for use in request handling. The client
and its connection pool belong to the process; requests only borrow it.
"""

from typing import Generator

from pymongo.database import Database

from chat_service.repositories.interactions.database import get_database


def get_db() -> Generator[Database, None, None]:  # type: ignore[type-arg]
    """
    Yield the service database.

    This function is typically used as a FastAPI dependency to provide
    a database handle per request.
    """
    yield get_database()
