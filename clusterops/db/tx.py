from __future__ import annotations

from typing import Any, Mapping, Protocol

from sqlalchemy import text
from sqlalchemy.engine import Connection, CursorResult, Engine
from sqlalchemy.sql.expression import Executable


class ClusterTx(Protocol):
    """
    Protocol for a transaction bound to the identity of the local node.

    Everything in ``clusterops.db`` runs against this protocol, so accessors
    can be exercised with a real DbTransaction or with a test fake.
    """

    @property
    def node_id(self) -> int:
        """Identifier of the node this transaction acts for."""
        ...

    @property
    def dialect_name(self) -> str:
        """SQLAlchemy dialect name of the underlying store."""
        ...

    def execute(
        self,
        sql: str | Executable,
        params: Mapping[str, Any] | None = None,
    ) -> int:
        """Execute a non-SELECT statement and return affected row count."""
        ...

    def execute_scalar(
        self,
        sql: str | Executable,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        """Execute a statement expected to return a single scalar value."""
        ...

    def fetch_one(
        self,
        sql: str | Executable,
        params: Mapping[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """Execute a SELECT expected to return 0 or 1 row."""
        ...

    def fetch_all(
        self,
        sql: str | Executable,
        params: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Execute a SELECT returning multiple rows."""
        ...

    def fetch_scalars(
        self,
        sql: str | Executable,
        params: Mapping[str, Any] | None = None,
    ) -> list[Any]:
        """Execute a SELECT and return the first column of every row."""
        ...


class DbTransaction:
    """
    Database transaction bound to a local node, with explicit commit/rollback.

    The transaction begins on construction and must be committed or rolled
    back exactly once. After that the connection is closed and any further
    use raises RuntimeError.

    It can also be used as a context manager, committing on a clean exit and
    rolling back when the block raises:

        factory = DbFactory(engine)
        with factory.begin(node_id=1) as tx:
            create_operation(tx, "", "abc-1", OperationType.IMAGE_IMPORT)

    Do NOT retry inside a single DbTransaction. Each attempt needs its own
    transaction from DbFactory.begin().
    """

    def __init__(self, engine: Engine, node_id: int) -> None:
        self.engine = engine
        self._node_id = node_id
        self._conn: Connection | None = None
        self._tx = None
        self._closed = False

        self._conn = self.engine.connect()
        self._tx = self._conn.begin()

    @property
    def node_id(self) -> int:
        return self._node_id

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "DbTransaction":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._closed:
            return False
        if exc_type:
            self.rollback()
        else:
            self.commit()
        return False

    def _connection(self) -> Connection:
        if self._closed or self._conn is None:
            raise RuntimeError("Transaction is already closed")
        return self._conn

    def _close(self) -> None:
        self._closed = True
        if self._conn is not None:
            self._conn.close()
        self._conn = None
        self._tx = None

    def commit(self) -> None:
        """
        Commit the transaction and close the connection.

        Raises:
            RuntimeError: If transaction is already closed
        """
        if self._closed:
            raise RuntimeError("Transaction is already closed")
        try:
            if self._tx is not None:
                self._tx.commit()
        finally:
            self._close()

    def rollback(self) -> None:
        """
        Rollback the transaction and close the connection.

        Raises:
            RuntimeError: If transaction is already closed
        """
        if self._closed:
            raise RuntimeError("Transaction is already closed")
        try:
            if self._tx is not None:
                self._tx.rollback()
        finally:
            self._close()

    def _run(
        self,
        sql: str | Executable,
        params: Mapping[str, Any] | None,
    ) -> CursorResult:
        conn = self._connection()
        stmt = text(sql) if isinstance(sql, str) else sql
        if params:
            return conn.execute(stmt, dict(params))
        return conn.execute(stmt)

    def execute(
        self,
        sql: str | Executable,
        params: Mapping[str, Any] | None = None,
    ) -> int:
        """
        Execute a non-SELECT statement and return affected row count.

        Raises:
            RuntimeError: If transaction is closed or rowcount is None
        """
        result = self._run(sql, params)
        try:
            if result.rowcount is None:
                raise RuntimeError(
                    "execute() received None rowcount for statement. "
                    "This may indicate a DDL statement or unsupported operation type."
                )
            return int(result.rowcount)
        finally:
            result.close()

    def execute_scalar(
        self,
        sql: str | Executable,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        result = self._run(sql, params)
        try:
            return result.scalar_one_or_none()
        finally:
            result.close()

    def fetch_one(
        self,
        sql: str | Executable,
        params: Mapping[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """
        Execute a SELECT expected to return 0 or 1 row.

        Raises:
            RuntimeError: If transaction is closed
            MultipleResultsFound: If more than one row is returned
        """
        result = self._run(sql, params)
        try:
            row = result.mappings().one_or_none()
            if row is None:
                return None
            return dict(row)
        finally:
            result.close()

    def fetch_all(
        self,
        sql: str | Executable,
        params: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        result = self._run(sql, params)
        try:
            return [dict(row) for row in result.mappings()]
        finally:
            result.close()

    def fetch_scalars(
        self,
        sql: str | Executable,
        params: Mapping[str, Any] | None = None,
    ) -> list[Any]:
        result = self._run(sql, params)
        try:
            return list(result.scalars())
        finally:
            result.close()


class DbFactory:
    """
    Factory for node-bound database transactions.

    Usage:
        factory = DbFactory(engine)
        tx = factory.begin(node_id)
        try:
            # Use tx...
            tx.commit()
        except Exception:
            tx.rollback()
            raise
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def begin(self, node_id: int) -> DbTransaction:
        """Begin a new transaction acting on behalf of ``node_id``."""
        return DbTransaction(self.engine, node_id)
