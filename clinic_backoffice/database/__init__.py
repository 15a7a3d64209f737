"""
Async database access (SQLAlchemy 2.0 + asyncpg).
"""

from clinic_backoffice.database.async_db import (
    AsyncSessionLocal,
    async_engine,
    check_db_connection,
    get_async_db,
    get_async_db_context,
)

__all__ = [
    "AsyncSessionLocal",
    "async_engine",
    "check_db_connection",
    "get_async_db",
    "get_async_db_context",
]
