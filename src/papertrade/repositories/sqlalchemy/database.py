"""Database connection and session management."""

from typing import Generator, Optional

from sqlalchemy import create_engine, event, Engine
from sqlalchemy.orm import sessionmaker, Session, declarative_base

from papertrade.config.settings import get_settings

Base = declarative_base()

# Module-level database state, created on first use
_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None


def _connect_args(database_url: str) -> dict:
    if database_url.startswith("sqlite"):
        # Sessions are handed across FastAPI's worker threads
        return {"check_same_thread": False}
    return {}


def use_immediate_transactions(engine: Engine) -> None:
    """
    Make every SQLite transaction take the write lock when it begins.

    pysqlite defers BEGIN until the first write, so two connections that
    read and then write can fail with "database is locked" instead of
    waiting on the busy timeout.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def _create_engine(database_url: str) -> Engine:
    engine = create_engine(
        database_url,
        connect_args=_connect_args(database_url),
        echo=False,
    )
    if database_url.startswith("sqlite") and ":memory:" not in database_url:
        use_immediate_transactions(engine)
    return engine


def get_engine() -> Engine:
    """Get or create the database engine."""
    global _engine
    if _engine is None:
        database_url = get_settings().get_database_url()
        _engine = _create_engine(database_url)
    return _engine


def get_session_factory() -> sessionmaker:
    """Get or create the session factory."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=get_engine(),
        )
    return _SessionLocal


def get_db() -> Generator[Session, None, None]:
    """Dependency that provides a database session."""
    SessionLocal = get_session_factory()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Initialize database tables."""
    from papertrade.repositories.sqlalchemy import orm_models  # noqa: F401

    engine = get_engine()
    Base.metadata.create_all(bind=engine)
