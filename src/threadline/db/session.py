"""Database session configuration."""

from __future__ import annotations

from collections.abc import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from threadline.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import threadline.models  # noqa: E402,F401


def enable_sqlite_savepoints(engine: Engine) -> Engine:
    """Let SQLAlchemy own transaction boundaries on pysqlite.

    Side effects run inside SAVEPOINTs, which pysqlite's implicit BEGIN
    handling breaks; SQLAlchemy emits BEGIN itself once this is applied.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record) -> None:  # pragma: no cover
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn) -> None:  # pragma: no cover
        conn.exec_driver_sql("BEGIN")

    return engine


_is_sqlite = settings.database_url.startswith("sqlite")

engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,
    echo=settings.sql_debug,
    connect_args={"check_same_thread": False} if _is_sqlite else {},
)
if _is_sqlite:
    enable_sqlite_savepoints(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session for dependency injection."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

