from __future__ import annotations

from sqlalchemy import (
    BigInteger,
    Column,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    select,
)
from sqlalchemy.engine import Engine

DEFAULT_PROJECT = "default"

# SQLite only auto-assigns ids for INTEGER PRIMARY KEY (rowid alias).
_Id = BigInteger().with_variant(Integer(), "sqlite")

metadata = MetaData()

nodes = Table(
    "nodes",
    metadata,
    Column("id", _Id, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False, unique=True),
    Column("address", String(255), nullable=False, unique=True),
)

projects = Table(
    "projects",
    metadata,
    Column("id", _Id, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False, unique=True),
    Column("description", Text, nullable=False, default=""),
)

operations = Table(
    "operations",
    metadata,
    Column("id", _Id, primary_key=True, autoincrement=True),
    Column("uuid", String(255), nullable=False, unique=True),
    Column(
        "node_id",
        _Id,
        ForeignKey("nodes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("type", Integer, nullable=False, default=0),
    Column(
        "project_id",
        _Id,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=True,
    ),
)


def create_schema(engine: Engine) -> None:
    """
    Create the cluster tables (if missing) and the ``default`` project.
    """
    metadata.create_all(engine)
    with engine.begin() as conn:
        existing = conn.execute(
            select(projects.c.id).where(projects.c.name == DEFAULT_PROJECT)
        ).first()
        if existing is None:
            conn.execute(
                projects.insert().values(
                    name=DEFAULT_PROJECT, description="Default project"
                )
            )


def drop_schema(engine: Engine) -> None:
    metadata.drop_all(engine)
