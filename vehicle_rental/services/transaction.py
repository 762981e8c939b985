"""Unit-of-work helper shared by the services."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession


@asynccontextmanager
async def atomic(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Commit everything done in the block, or roll all of it back.

    The triggering exception is re-raised unchanged after the rollback.
    """
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
