"""Database infrastructure.

Exposes:
  - metadata:         MetaData shared by every table definition and Alembic.
  - get_engine():     The process-wide async engine, created on first use.
  - get_connection(): One transaction on a pooled AsyncConnection.
  - dispose_engine(): Close the pool on shutdown.

Every repository method opens exactly one ``get_connection()`` block, which
makes each entity write a single atomic unit: committed on clean exit,
rolled back if anything inside the block raises.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

# Naming convention keeps constraint names stable between the table
# definitions and the hand-written Alembic migration.
metadata: MetaData = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

_engine: AsyncEngine | None = None


def get_engine() -> AsyncEngine:
    """Return the singleton async engine, creating it on first call.

    constants is imported lazily so that Alembic can import ``metadata``
    without the application's full environment being present.
    """
    from release_notifier.config import constants

    global _engine
    if _engine is None:
        _engine = create_async_engine(
            constants.DATABASE_URL,
            echo=False,
            pool_pre_ping=True,
            # A scrape cycle writes media one by one after its fetches have
            # joined, so a small pool is enough for the worker and the API.
            pool_size=5,
            max_overflow=5,
        )
    return _engine


@asynccontextmanager
async def get_connection() -> AsyncGenerator[AsyncConnection, None]:
    """Yield a transactional AsyncConnection from the engine pool.

    Raises:
        Any SQLAlchemy exception propagated from the driver. Callers
        (repositories, the dispatcher) decide how to report them.
    """
    async with get_engine().begin() as conn:
        yield conn


async def dispose_engine() -> None:
    global _engine
    if _engine is not None:
        await _engine.dispose()
        _engine = None
