"""
Alembic migration environment configuration.
Runs on the connection handed over by database.connection.run_migrations,
or on DATABASE_URL when invoked from the alembic command line.
"""

import os
import sys
from logging.config import fileConfig

from sqlalchemy import create_engine, pool
from alembic import context

# Add project root to path for command-line runs
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

# Import our models and Base
from database.connection import Base
from database import models  # noqa: F401 - Import to register models

# Alembic Config object
config = context.config

# Set up Python logging from alembic.ini (command line only)
if config.config_file_name is not None and config.attributes.get('connection') is None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

# Set the target metadata for autogenerate support
target_metadata = Base.metadata


def get_url():
    """Get database URL from environment, falling back to the app config."""
    url = os.environ.get('DATABASE_URL')
    if not url:
        from config import get_config
        url = get_config().DATABASE_URL
    return url


def run_migrations_offline() -> None:
    """
    Run migrations in 'offline' mode.
    This generates SQL scripts without connecting to the database.
    """
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        render_as_batch=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """
    Run migrations in 'online' mode.
    Reuses a caller-provided connection when there is one.
    """
    connection = config.attributes.get('connection')
    if connection is not None:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=True
        )
        with context.begin_transaction():
            context.run_migrations()
        return

    connectable = create_engine(get_url(), poolclass=pool.NullPool)
    try:
        with connectable.connect() as connection:
            context.configure(
                connection=connection,
                target_metadata=target_metadata,
                render_as_batch=True
            )

            with context.begin_transaction():
                context.run_migrations()
    finally:
        connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
