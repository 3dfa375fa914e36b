"""Database session configuration."""

from __future__ import annotations

from collections.abc import Generator, Iterable
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from momlink.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


def sql_in_list(values: Iterable[str]) -> str:
    """Render string constants as the body of a SQL ``IN (...)`` check."""
    return ", ".join(f"'{value}'" for value in values)


# Ensure model modules are imported so that metadata is populated when create_all runs.
import momlink.models  # noqa: E402,F401


def configure_sqlite(target: Engine) -> None:
    """Make a SQLite engine honour foreign keys and SAVEPOINTs.

    FK enforcement is needed for ON DELETE CASCADE. pysqlite defers BEGIN on
    its own, which breaks nested transactions, so the driver is put in
    autocommit mode and SQLAlchemy emits BEGIN itself.
    """
    if target.dialect.name != "sqlite":
        return

    @event.listens_for(target, "connect")
    def _on_connect(dbapi_connection: Any, _record: Any) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(target, "begin")
    def _on_begin(connection: Any) -> None:
        connection.exec_driver_sql("BEGIN")


_connect_args = (
    {"check_same_thread": False}
    if settings.effective_database_url.startswith("sqlite")
    else {}
)

engine = create_engine(
    settings.effective_database_url,
    pool_pre_ping=True,
    echo=settings.sql_debug,
    connect_args=_connect_args,
)
configure_sqlite(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session for dependency injection."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    """Create all database tables."""
    Base.metadata.create_all(bind=engine)
