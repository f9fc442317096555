from __future__ import annotations

import logging

from sqlalchemy import select

from ..errors import NotFoundError
from .metrics import instrumented
from .operations import remove_node_operations
from .schema import nodes
from .tx import ClusterTx

logger = logging.getLogger(__name__)


@instrumented("create_node")
def create_node(tx: ClusterTx, name: str, address: str) -> int:
    """Register a cluster member and return its id."""
    tx.execute(nodes.insert().values(name=name, address=address))
    node_id = tx.execute_scalar(select(nodes.c.id).where(nodes.c.name == name))
    return int(node_id)


@instrumented("get_node_address")
def get_node_address(tx: ClusterTx, node_id: int) -> str:
    address = tx.execute_scalar(select(nodes.c.address).where(nodes.c.id == node_id))
    if address is None:
        raise NotFoundError(f"Node {node_id} not found")
    return str(address)


@instrumented("remove_node")
def remove_node(tx: ClusterTx, node_id: int) -> None:
    """
    Remove a node from the cluster, purging the operations it owns first.

    Raises:
        NotFoundError: If no node has that id
    """
    remove_node_operations(tx, node_id)
    n = tx.execute(nodes.delete().where(nodes.c.id == node_id))
    if n == 0:
        raise NotFoundError(f"Node {node_id} not found")
    logger.info("Removed node %s from the cluster", node_id)
