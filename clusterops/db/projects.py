from __future__ import annotations

from sqlalchemy import select

from ..errors import NotFoundError
from .metrics import instrumented
from .schema import projects
from .tx import ClusterTx


@instrumented("get_project_id")
def get_project_id(tx: ClusterTx, name: str) -> int:
    """
    Resolve a project name to its id.

    Raises:
        NotFoundError: If no project has that name
    """
    project_id = tx.execute_scalar(
        select(projects.c.id).where(projects.c.name == name)
    )
    if project_id is None:
        raise NotFoundError(f"Project {name!r} not found")
    return int(project_id)


@instrumented("create_project")
def create_project(tx: ClusterTx, name: str, description: str = "") -> int:
    tx.execute(projects.insert().values(name=name, description=description))
    return get_project_id(tx, name)
