"""
Database Session Management Module
==================================

Responsible for:
- Creating the reference backend engine
- Managing session lifecycle
- Building session factories for the backend and the HTTP surface
- Enforcing foreign keys on SQLite

The engine is created lazily so that importing this module never opens a
database; tests and the HTTP surface may inject their own session factory.
"""

from typing import Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from contacerta.core.config import get_settings
from contacerta.core.logging import get_logger
from contacerta.db.base import Base

# Initialize logger
logger = get_logger(__name__)

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


# ==========================
# Database Engine
# ==========================

def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """Turn on foreign key enforcement for every new SQLite connection."""

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create an engine for the given URL.

    Args:
        database_url: SQLAlchemy database URL
        echo: Echo SQL statements

    Returns:
        Configured Engine
    """
    is_sqlite = database_url.startswith("sqlite")
    connect_args = {"check_same_thread": False} if is_sqlite else {}

    engine = create_engine(
        database_url,
        pool_pre_ping=True,
        echo=echo,
        connect_args=connect_args,
    )
    if is_sqlite:
        enable_sqlite_foreign_keys(engine)
    return engine


def get_engine() -> Engine:
    """Get the process-wide engine, creating it on first use."""
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = build_engine(settings.database_url, echo=settings.debug)
        logger.info("database_engine_created", dialect=_engine.dialect.name)
    return _engine


# ==========================
# Session Factory
# ==========================

def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,  # Objects stay readable after commit
    )


def get_session_factory() -> sessionmaker:
    """Get the process-wide session factory."""
    global _session_factory
    if _session_factory is None:
        _session_factory = build_session_factory(get_engine())
    return _session_factory


def create_schema(engine: Optional[Engine] = None) -> None:
    """
    Create all tables of the reference backend.

    Args:
        engine: Target engine, defaults to the process-wide one
    """
    # Import models so they register with the metadata
    import contacerta.models  # noqa: F401

    Base.metadata.create_all(bind=engine or get_engine())


# ==========================
# Database Health Check
# ==========================

def check_database_connection(engine: Optional[Engine] = None) -> bool:
    """
    Check if database connection is healthy.

    Returns:
        True if connection is healthy, False otherwise
    """
    try:
        with (engine or get_engine()).connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error("database_health_check_failed", error=str(e))
        return False
