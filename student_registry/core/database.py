from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import QueuePool
from .config import Settings
import logging

logger = logging.getLogger(__name__)

# Base class for models
Base = declarative_base()


# =============================================================================
# DATABASE ENGINE CONFIGURATION
# =============================================================================

def create_db_engine(settings: Settings) -> Engine:
    """
    Create the engine that owns the connection pool for this process.

    The pool is lazy: no connection is opened until the first query.
    """
    url = settings.get_database_url()
    options = {
        "echo": settings.DB_ECHO_SQL,  # Print all SQL queries to the log
        "connect_args": settings.get_connect_args(),
    }

    if url.get_backend_name() == "postgresql":
        options.update(
            poolclass=QueuePool,
            pool_size=settings.DB_POOL_SIZE,  # Number of connections to keep open
            max_overflow=settings.DB_MAX_OVERFLOW,  # Max connections beyond pool_size
            pool_timeout=settings.DB_POOL_TIMEOUT,  # Seconds to wait for connection
            pool_pre_ping=True,  # Test connection before using (detect disconnects)
        )

    engine = create_engine(url, **options)
    event.listen(engine, "checkout", _log_checkout)
    logger.debug("Engine created for %s", url.render_as_string(hide_password=True))
    return engine


def _log_checkout(dbapi_conn, connection_record, connection_proxy):
    logger.debug("Connection checked out from pool")


# =============================================================================
# SESSION CONFIGURATION
# =============================================================================

def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autoflush=False,   # Don't auto-flush before queries
        bind=engine,
        expire_on_commit=False  # Don't expire objects after commit
    )


@contextmanager
def get_db(session_factory: sessionmaker) -> Iterator[Session]:
    """
    Yield one database session and close it afterwards,
    even if the command fails.
    """
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


# =============================================================================
# LIFECYCLE
# =============================================================================

@contextmanager
def open_database(settings: Settings) -> Iterator[sessionmaker]:
    """
    Scope the connection pool to a block.

    The engine is disposed exactly once when the block exits,
    whether the command succeeded or raised.
    """
    engine = create_db_engine(settings)
    try:
        yield create_session_factory(engine)
    finally:
        engine.dispose()
        logger.debug("Connection pool disposed")
