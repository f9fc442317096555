from .engine import make_engine
from .helpers import select_strings, upsert_object
from .models import Operation, OperationType
from .nodes import create_node, get_node_address, remove_node
from .operations import (
    create_operation,
    get_operation_by_id,
    get_operation_by_uuid,
    list_local_operation_uuids,
    list_local_operations,
    list_node_addresses_with_operations,
    list_operations_of_type,
    remove_node_operations,
    remove_operation,
)
from .projects import create_project, get_project_id
from .schema import create_schema, drop_schema
from .tx import ClusterTx, DbFactory, DbTransaction

__all__ = [
    "make_engine",
    "create_schema",
    "drop_schema",
    "ClusterTx",
    "DbTransaction",
    "DbFactory",
    "Operation",
    "OperationType",
    "select_strings",
    "upsert_object",
    "create_node",
    "get_node_address",
    "remove_node",
    "create_project",
    "get_project_id",
    "list_local_operations",
    "list_local_operation_uuids",
    "list_node_addresses_with_operations",
    "list_operations_of_type",
    "get_operation_by_id",
    "get_operation_by_uuid",
    "create_operation",
    "remove_operation",
    "remove_node_operations",
]
