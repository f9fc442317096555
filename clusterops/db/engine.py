from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from ..config import DbConfig


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


def make_engine(config: DbConfig) -> Engine:
    """
    Create a SQLAlchemy Engine for the shared cluster database.

    For SQLite, foreign key enforcement is switched on for every pooled
    connection so that ``operations.node_id`` and ``operations.project_id``
    behave the same as on MySQL/PostgreSQL.
    """
    engine = create_engine(
        config.url,
        pool_pre_ping=config.pool_pre_ping,
        echo=config.echo,
    )
    if engine.dialect.name == "sqlite" and config.sqlite_foreign_keys:
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine
