import asyncio
from logging.config import fileConfig

from sqlalchemy import pool, engine_from_config
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config
from sqlmodel import SQLModel

from alembic import context

from buildermatch.core.config import get_settings
from buildermatch.database.sqlmodel_engine import SQLModelDatabaseManager

# Import ALL models so autogenerate sees every table
from buildermatch.infrastructure.persistence.models import (  # noqa: F401
    BuilderProfileTable,
    ConversationTable,
    FounderProfileTable,
    InterestTable,
    MessageTable,
    OpeningTable,
    SuggestedMatchTable,
    TrialTable,
    UserAccountTable,
)

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Fall back to the application settings when alembic.ini leaves the URL empty
if not config.get_main_option("sqlalchemy.url"):
    config.set_main_option("sqlalchemy.url", SQLModelDatabaseManager(get_settings()).database_url)

target_metadata = SQLModel.metadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode.

    Emits SQL to the script output without connecting.
    """
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
        render_as_batch=True
    )

    with context.begin_transaction():
        context.run_migrations()


def run_sync_migrations() -> None:
    """Run migrations with a synchronous engine."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        do_run_migrations(connection)

    connectable.dispose()


async def run_async_migrations() -> None:
    """Run migrations with an async engine (asyncpg, aiosqlite)."""
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode, picking the engine from the URL driver."""
    url = config.get_main_option("sqlalchemy.url")

    if url and ("asyncpg" in url or "aiosqlite" in url):
        try:
            asyncio.get_running_loop()
            # Already inside an event loop; asyncio.run() is not allowed here
            run_sync_migrations()
        except RuntimeError:
            asyncio.run(run_async_migrations())
    else:
        run_sync_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
