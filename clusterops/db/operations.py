"""
Directory of the long-running operations running across the cluster.

Every node that starts a long-running task registers a row in the shared
``operations`` table so that any other node can find out where the task is
running and what kind it is. All accessors take a ClusterTx as first
argument and run inside it: they never commit, roll back, lock or retry.
The local node is always ``tx.node_id``.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping

from ..errors import InvariantViolationError, NotFoundError, StorageError
from .helpers import select_strings, storage_context, upsert_object
from .metrics import instrumented
from .models import Operation, OperationType
from .projects import get_project_id
from .schema import operations as operations_table
from .tx import ClusterTx

logger = logging.getLogger(__name__)

_OPERATION_COLUMNS = (
    "operations.id AS id, operations.uuid AS uuid, "
    "nodes.address AS node_address, operations.type AS type"
)

_PROJECT_OR_GLOBAL = "(projects.name = :project OR operations.project_id IS NULL)"


def _query(
    columns: str,
    where: str = "",
    distinct: bool = False,
    order_by: str = "operations.id",
) -> str:
    # The one place that knows the join shape of the operations table.
    sql = (
        f"SELECT {'DISTINCT ' if distinct else ''}{columns} "
        "FROM operations "
        "JOIN nodes ON nodes.id = operations.node_id "
        "LEFT JOIN projects ON projects.id = operations.project_id "
    )
    if where:
        sql += f"WHERE {where} "
    sql += f"ORDER BY {order_by}"
    return sql


def _operations(
    tx: ClusterTx,
    where: str = "",
    params: Mapping[str, Any] | None = None,
) -> list[Operation]:
    """
    Return all operations in the cluster matching the given predicate,
    ordered by id.
    """
    with storage_context("Failed to fetch operations"):
        rows = tx.fetch_all(_query(_OPERATION_COLUMNS, where), params)
    return [
        Operation(
            id=int(row["id"]),
            uuid=row["uuid"],
            node_address=row["node_address"],
            type=OperationType.from_code(row["type"]),
        )
        for row in rows
    ]


def _exactly_one(operations: list[Operation], key: str) -> Operation:
    if not operations:
        raise NotFoundError(f"No operation matches {key}")
    if len(operations) > 1:
        raise InvariantViolationError(
            f"More than one operation matches {key} ({len(operations)} rows)"
        )
    return operations[0]


@instrumented("list_local_operations")
def list_local_operations(tx: ClusterTx) -> list[Operation]:
    """Return all operations owned by the local node."""
    return _operations(tx, "operations.node_id = :node_id", {"node_id": tx.node_id})


@instrumented("list_local_operation_uuids")
def list_local_operation_uuids(tx: ClusterTx) -> list[str]:
    """Return the UUIDs of all operations owned by the local node."""
    return select_strings(
        tx,
        _query("operations.uuid", "operations.node_id = :node_id"),
        {"node_id": tx.node_id},
        context="Failed to fetch operation UUIDs",
    )


@instrumented("list_node_addresses_with_operations")
def list_node_addresses_with_operations(tx: ClusterTx, project: str) -> list[str]:
    """
    Return the addresses of the nodes running at least one operation that
    belongs to ``project`` or to no project at all.
    """
    return select_strings(
        tx,
        _query(
            "nodes.address",
            _PROJECT_OR_GLOBAL,
            distinct=True,
            order_by="nodes.address",
        ),
        {"project": project},
        context="Failed to fetch node addresses",
    )


@instrumented("list_operations_of_type")
def list_operations_of_type(
    tx: ClusterTx,
    project: str,
    op_type: OperationType | int,
) -> list[Operation]:
    """
    Return the operations of the given type that belong to ``project``,
    plus the global ones of that type.
    """
    return _operations(
        tx,
        f"{_PROJECT_OR_GLOBAL} AND operations.type = :type",
        {"project": project, "type": int(op_type)},
    )


@instrumented("get_operation_by_id")
def get_operation_by_id(tx: ClusterTx, op_id: int) -> Operation:
    """
    Return the operation with the given id.

    Raises:
        NotFoundError: If no operation has that id
        InvariantViolationError: If more than one does
    """
    operations = _operations(tx, "operations.id = :id", {"id": op_id})
    return _exactly_one(operations, f"id {op_id}")


@instrumented("get_operation_by_uuid")
def get_operation_by_uuid(tx: ClusterTx, uuid: str) -> Operation:
    """
    Return the operation with the given UUID.

    Raises:
        NotFoundError: If no operation has that UUID
        InvariantViolationError: If more than one does
    """
    operations = _operations(tx, "operations.uuid = :uuid", {"uuid": uuid})
    return _exactly_one(operations, f"uuid {uuid!r}")


@instrumented("create_operation")
def create_operation(
    tx: ClusterTx,
    project: str,
    uuid: str,
    op_type: OperationType | int,
) -> int:
    """
    Register an operation running on the local node and return its id.

    An empty ``project`` registers a global operation. Creating an operation
    whose UUID already exists overwrites the node, type and project of the
    existing row and keeps its id.

    Raises:
        NotFoundError: If ``project`` is not empty and does not exist
    """
    project_id: int | None = None
    if project != "":
        try:
            project_id = get_project_id(tx, project)
        except NotFoundError as exc:
            raise NotFoundError(f"Fetch project ID: {exc}") from exc
        except StorageError as exc:
            raise StorageError(f"Fetch project ID: {exc}", "create_operation") from exc

    op_id = upsert_object(
        tx,
        operations_table,
        ("uuid",),
        {
            "uuid": uuid,
            "node_id": tx.node_id,
            "type": int(op_type),
            "project_id": project_id,
        },
    )
    logger.debug(
        "Registered operation %s (type %s) on node %s as id %s",
        uuid,
        int(op_type),
        tx.node_id,
        op_id,
    )
    return op_id


@instrumented("remove_operation")
def remove_operation(tx: ClusterTx, uuid: str) -> None:
    """
    Remove the operation with the given UUID.

    Raises:
        NotFoundError: If no operation has that UUID
        InvariantViolationError: If more than one row was deleted
    """
    n = tx.execute("DELETE FROM operations WHERE uuid = :uuid", {"uuid": uuid})
    if n == 0:
        raise NotFoundError(f"No operation matches uuid {uuid!r}")
    if n != 1:
        raise InvariantViolationError(f"query deleted {n} rows instead of 1")
    logger.debug("Removed operation %s", uuid)


@instrumented("remove_node_operations")
def remove_node_operations(tx: ClusterTx, node_id: int) -> None:
    """
    Remove all operations owned by the given node.

    Finding nothing to delete is not an error.
    """
    n = tx.execute("DELETE FROM operations WHERE node_id = :node_id", {"node_id": node_id})
    logger.debug("Removed %s operations of node %s", n, node_id)
