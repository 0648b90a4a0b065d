"""
Database connection management for the quoting/ordering data layer.
Handles engine creation, schema migration on open, and unit-of-work sessions.
"""

import os
import logging
from contextlib import contextmanager
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from alembic.util import CommandError

from errors import StorageIOError, StorageUnavailable

logger = logging.getLogger(__name__)

# SQLAlchemy Base for model declarations
Base = declarative_base()

# Alembic scripts ship inside the package
MIGRATIONS_FOLDER = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'migrations')

# Default store, set by init_db()
store = None


class Store:
    """
    An opened, migrated database. Every `session_scope()` block is one
    atomic unit of work.
    """

    def __init__(self, engine):
        self.engine = engine
        self.SessionLocal = sessionmaker(
            bind=engine, autocommit=False, autoflush=False, expire_on_commit=False
        )

    @contextmanager
    def session_scope(self):
        """
        Context manager for getting a database session.
        Commits on success, rolls back on any failure.

        Example:
            with store.session_scope() as session:
                CustomersRepository(session).add({...})
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Storage operation failed: {e}")
            raise StorageIOError(f"Storage operation failed: {e}") from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def schema_version(self) -> Optional[str]:
        """Return the Alembic revision the store is migrated to."""
        from alembic.runtime.migration import MigrationContext

        with self.engine.connect() as conn:
            return MigrationContext.configure(conn).get_current_revision()

    def close(self):
        self.engine.dispose()


def create_store_engine(url: str, echo: bool = False):
    """Create the SQLAlchemy engine; in-memory SQLite shares one connection."""
    sa_url = make_url(url)
    kwargs = {'echo': echo}
    if sa_url.get_backend_name() == 'sqlite':
        kwargs['connect_args'] = {'check_same_thread': False}
        if not sa_url.database or sa_url.database == ':memory:':
            kwargs['poolclass'] = StaticPool
        else:
            directory = os.path.dirname(os.path.abspath(sa_url.database))
            os.makedirs(directory, exist_ok=True)
    return create_engine(sa_url, **kwargs)


def run_migrations(engine, script_location: str = None):
    """
    Bring the schema up to the latest revision. Revisions are additive, and
    an up-to-date store is left untouched.
    """
    from alembic import command
    from alembic.config import Config as AlembicConfig

    alembic_cfg = AlembicConfig()
    alembic_cfg.set_main_option('script_location', script_location or MIGRATIONS_FOLDER)
    with engine.begin() as connection:
        alembic_cfg.attributes['connection'] = connection
        command.upgrade(alembic_cfg, 'head')


def check_db_connection(engine):
    """
    Verify that the database connection is working.
    Returns True if connection is successful, raises exception otherwise.
    """
    with engine.connect() as conn:
        conn.execute(text("SELECT 1")).fetchone()
    logger.info("Database connection verified successfully")
    return True


def open_store(url: str, echo: bool = False, script_location: str = None) -> Store:
    """
    Open (and migrate) the store at `url`.
    Raises StorageUnavailable if the database cannot be reached or migrated.
    """
    try:
        engine = create_store_engine(url, echo=echo)
        check_db_connection(engine)
        run_migrations(engine, script_location)
    except (SQLAlchemyError, CommandError, OSError, ImportError) as e:
        logger.error(f"Failed to open store: {e}")
        raise StorageUnavailable(f"Cannot open store: {e}") from e
    opened = Store(engine)
    logger.info(f"Store opened at schema revision {opened.schema_version()}")
    return opened


def init_db(config):
    """
    Open the default store from a configuration class (see config.py).
    This should be called at application startup.
    """
    global store
    store = open_store(
        config.DATABASE_URL,
        echo=getattr(config, 'SQL_ECHO', False),
        script_location=getattr(config, 'MIGRATIONS_FOLDER', None)
    )
    return store


@contextmanager
def get_db_session():
    """
    Context manager over the default store opened by init_db().
    Use this in non-route code.
    """
    if store is None:
        raise StorageUnavailable("Store not initialized. Call init_db() first.")
    with store.session_scope() as session:
        yield session
