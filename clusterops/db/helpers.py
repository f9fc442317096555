from __future__ import annotations

import re
from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Sequence

from sqlalchemy import Table, and_, select, update
from sqlalchemy.dialects.mysql import insert as mysql_insert
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError

from ..errors import StorageError
from .tx import ClusterTx

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


def _validate_identifier(name: str, identifier_type: str = "identifier") -> str:
    """
    Validate that an identifier (table/column name) is safe for SQL interpolation.

    Identifiers MUST still be trusted (hardcoded in this package). The check
    only guards against typos turning into malformed SQL.

    Raises:
        TypeError: If identifier is not a string
        ValueError: If identifier contains unsafe characters or is invalid
    """
    if not isinstance(name, str):
        raise TypeError(f"{identifier_type} must be a string, got {type(name).__name__}")

    if not name:
        raise ValueError(f"{identifier_type} cannot be empty")

    if not _IDENTIFIER_RE.match(name):
        raise ValueError(
            f"Invalid {identifier_type} {name!r}: "
            "must start with letter/underscore and contain only alphanumeric characters and underscores"
        )

    if len(name) > 64:
        raise ValueError(f"{identifier_type} {name!r} exceeds the 64-character limit")

    return name


@contextmanager
def storage_context(context: str) -> Iterator[None]:
    """
    Prefix any store failure raised inside the block with ``context``.

    The resulting StorageError has no accessor yet; the instrumented
    accessor it propagates through fills that in.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        raise StorageError(f"{context}: {exc}") from exc


def select_strings(
    tx: ClusterTx,
    sql: str,
    params: Mapping[str, Any] | None = None,
    context: str = "Failed to fetch strings",
) -> list[str]:
    """
    Run a single-column SELECT and return its values as strings.
    """
    with storage_context(context):
        values = tx.fetch_scalars(sql, params)
    return [str(value) for value in values]


def upsert_object(
    tx: ClusterTx,
    table: Table,
    key_columns: Sequence[str],
    values: Mapping[str, Any],
) -> int:
    """
    Insert a row, or overwrite the row that already has the same key.

    ``key_columns`` must be covered by a unique constraint on ``table``. The
    store's native upsert is used where the dialect has one, so concurrent
    writers of the same key resolve to last-writer-wins inside the engine
    instead of failing with a duplicate key error. Other dialects get an
    UPDATE followed by an INSERT when nothing was updated.

    Returns the ``id`` of the inserted or overwritten row. The id of an
    existing row is preserved.
    """
    _validate_identifier(table.name, "table")
    for col in key_columns:
        _validate_identifier(col, "key column")
        if col not in values:
            raise ValueError(f"key column {col!r} missing from values")
    for col in values:
        _validate_identifier(col, "column name")

    updates = {col: val for col, val in values.items() if col not in key_columns}
    dialect = tx.dialect_name

    if dialect in ("sqlite", "postgresql"):
        factory = sqlite_insert if dialect == "sqlite" else postgresql_insert
        stmt = factory(table).values(**values)
        if updates:
            stmt = stmt.on_conflict_do_update(
                index_elements=list(key_columns),
                set_={col: stmt.excluded[col] for col in updates},
            )
        else:
            stmt = stmt.on_conflict_do_nothing(index_elements=list(key_columns))
        tx.execute(stmt)
    elif dialect in ("mysql", "mariadb"):
        stmt = mysql_insert(table).values(**values)
        # A no-op assignment keeps ON DUPLICATE KEY valid when only keys are given.
        assignments = {col: stmt.inserted[col] for col in (updates or key_columns)}
        tx.execute(stmt.on_duplicate_key_update(**assignments))
    else:
        matched = 0
        if updates:
            matched = tx.execute(
                update(table)
                .where(and_(*(table.c[col] == values[col] for col in key_columns)))
                .values(**updates)
            )
        if matched == 0 and tx.execute_scalar(_select_id(table, key_columns, values)) is None:
            tx.execute(table.insert().values(**values))

    row_id = tx.execute_scalar(_select_id(table, key_columns, values))
    if row_id is None:
        raise RuntimeError(f"upsert into {table.name} left no row for key {key_columns}")
    return int(row_id)


def _select_id(table: Table, key_columns: Sequence[str], values: Mapping[str, Any]):
    return select(table.c.id).where(
        and_(*(table.c[col] == values[col] for col in key_columns))
    )
