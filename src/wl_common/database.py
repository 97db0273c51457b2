from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from config.settings import settings
from src.wl_common.errors import BalanceBusyError

# SET does not take bind parameters; the value comes from settings, not users
_LOCK_TIMEOUT_SQL = text(
    f"SET LOCAL lock_timeout = '{int(settings.BALANCE_LOCK_TIMEOUT_SECONDS * 1000)}ms'"
)
_LOCK_NOT_AVAILABLE = "55P03"  # PostgreSQL lock_not_available


def _sqlstate(exc: DBAPIError) -> str | None:
    # asyncpg errors adapted by SQLAlchemy expose both names
    return getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None)


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models across modules."""

    pass


engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=20,
    max_overflow=10,
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: yields an AsyncSession, auto-closes after request."""
    async with async_session_factory() as session:
        yield session


@asynccontextmanager
async def unit_of_work(db: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Commit once on success, roll back on any exception and re-raise.

    Every money-moving service call runs inside exactly one of these, so a
    multi-step mutation is either fully visible or not at all.

    Row-lock waits (SELECT ... FOR UPDATE) are bounded by the same
    BALANCE_LOCK_TIMEOUT_SECONDS as the balance locks; a wait that runs out
    surfaces as BalanceBusyError.
    """
    try:
        await db.execute(_LOCK_TIMEOUT_SQL)
        yield db
        await db.commit()
    except DBAPIError as exc:
        await db.rollback()
        if _sqlstate(exc) == _LOCK_NOT_AVAILABLE:
            raise BalanceBusyError() from exc
        raise
    except Exception:
        await db.rollback()
        raise
