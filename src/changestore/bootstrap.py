"""
Single entry-point that wires an AsyncEngine into a ChangeStore.
Call once, e.g. in a FastAPI lifespan handler.
"""

from sqlalchemy.ext.asyncio import AsyncEngine

from .persistence.models import Base
from .persistence.store import ChangeStore


async def init_changestore(engine: AsyncEngine, create_schema: bool = True) -> ChangeStore:
    """
    Optionally create the `changes` table, then return a store bound to
    `engine`. The engine stays owned by the caller.
    """
    if create_schema:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)  # no-op when the table exists
    return ChangeStore(engine)
