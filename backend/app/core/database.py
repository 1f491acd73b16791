"""
Async database engine, session factory, and ORM base.

Two ways to get a session:
  • get_db_session()  — FastAPI dependency, one session per request.
    Whoever writes (the store or a router) commits.
  • session_scope()   — for scripts: commits on success, rolls back
    on error.

ping_database() is the startup connectivity check used by the lifespan.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.core.config import settings

# ── Engine ──────────────────────────────────────────────────
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    # Feedback rows are read back for the response and the email
    # snapshot after commit.
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Declarative base for Project and Feedback."""


# ── Sessions ────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; closed when the response is done."""
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


@asynccontextmanager
async def session_scope() -> AsyncGenerator[AsyncSession, None]:
    """Unit of work for code running outside a request."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def ping_database() -> None:
    """SELECT 1 against the pool. Raises if the database is unreachable."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
