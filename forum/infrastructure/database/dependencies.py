"""FastAPI dependency injection for database session management.

Each request that needs the database receives its own AsyncSession, committed
when the handler returns and rolled back when it raises.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from forum.infrastructure.database.session import get_async_session


async def get_db() -> AsyncGenerator[AsyncSession]:
    """Provide a request-scoped database session.

    Yields:
        AsyncGenerator[AsyncSession]: Session committed on success, rolled
            back on error.
    """
    async with get_async_session() as session:
        yield session


DatabaseSession = Annotated[AsyncSession, Depends(get_db)]
