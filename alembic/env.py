"""
Alembic environment configuration.

Connects to the database and runs migrations.
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context

# Import our models so Alembic can detect them
from app.core.database import Base
from app.models import RefreshToken  # noqa: F401

from app.core.config import settings

# This is the Alembic Config object
config = context.config

# Note: We don't use config.set_main_option for the URL because ConfigParser
# interprets % as interpolation syntax. The URL is passed directly instead.

# Interpret the config file for Python logging
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Target metadata for autogenerate
target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """
    Run migrations in 'offline' mode.

    This configures the context with just a URL and emits SQL to the script
    output, so no DBAPI needs to be available.
    """
    context.configure(
        url=settings.database_url_computed,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """
    Run migrations in 'online' mode against the async engine.
    """
    connectable = create_async_engine(
        settings.database_url_computed,
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
