"""
Alembic environment for the projects/feedback schema (asyncpg).

  • The URL is taken from app settings, so .env is the only place it lives.
  • Autogenerate only considers tables declared on Base.metadata; any
    other tables in the database are left alone.
  • An autogenerate run that finds no changes writes no revision file.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

from app.core.config import settings
from app.core.database import Base
from app.models.feedback import Feedback
from app.models.project import Project

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata
MANAGED_TABLES = {Project.__tablename__, Feedback.__tablename__}


def include_object(obj, name, type_, reflected, compare_to) -> bool:  # type: ignore[no-untyped-def]
    if type_ == "table":
        return name in MANAGED_TABLES
    return True


def skip_empty_revision(context_, revision, directives) -> None:  # type: ignore[no-untyped-def]
    if getattr(context_.config.cmd_opts, "autogenerate", False):
        script = directives[0]
        if script.upgrade_ops.is_empty():
            directives[:] = []


def _configure(**kwargs) -> None:  # type: ignore[no-untyped-def]
    context.configure(
        target_metadata=target_metadata,
        include_object=include_object,
        process_revision_directives=skip_empty_revision,
        compare_type=True,
        **kwargs,
    )


# ── Offline: emit SQL only ──────────────────────────────────
def run_migrations_offline() -> None:
    _configure(
        url=settings.DATABASE_URL,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


# ── Online: async engine, sync migration callback ───────────
def _run_sync(connection) -> None:  # type: ignore[no-untyped-def]
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    migration_engine = create_async_engine(settings.DATABASE_URL, poolclass=pool.NullPool)
    try:
        async with migration_engine.connect() as connection:
            await connection.run_sync(_run_sync)
    finally:
        await migration_engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
