"""
Helpers shared by Celery tasks.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from marketplace.config.database import create_engine
from marketplace.config.logging import get_logger

logger = get_logger(__name__)


def run_async_in_new_loop(coro):
    """
    Run an async coroutine in a new event loop.

    Each Celery task gets its own event loop so connections never cross
    loops between tasks of the same worker process.
    """
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    except Exception as e:
        logger.error("Error in async execution", error=str(e))
        raise
    finally:
        loop.close()
        asyncio.set_event_loop(None)


@asynccontextmanager
async def task_session() -> AsyncIterator[AsyncSession]:
    """A session on an engine owned by the current task's loop."""
    engine = create_engine()
    session_factory = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )
    try:
        async with session_factory() as session:
            yield session
    finally:
        await engine.dispose()
