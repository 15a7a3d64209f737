"""
Session helpers shared by the scheduling repositories.

A reminder tick and a webhook request each run every repository on one
AsyncSession. After a failed statement PostgreSQL aborts the transaction,
so the session is rolled back before the error propagates; otherwise
every later statement on it raises PendingRollbackError.
"""

from typing import Any

from sqlalchemy.engine import Result
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Executable


async def execute_or_rollback(session: AsyncSession, statement: Executable, **kwargs: Any) -> Result[Any]:
    """Execute ``statement``, rolling the session back on a database error."""
    try:
        return await session.execute(statement, **kwargs)
    except SQLAlchemyError:
        await session.rollback()
        raise
