from .config import DbConfig
from .db.engine import make_engine
from .db.models import Operation, OperationType
from .db.tx import DbFactory, DbTransaction
from .errors import (
    ClusterOpsError,
    InvariantViolationError,
    NotFoundError,
    StorageError,
)

__all__ = [
    "DbConfig",
    "make_engine",
    "DbFactory",
    "DbTransaction",
    "Operation",
    "OperationType",
    "ClusterOpsError",
    "NotFoundError",
    "InvariantViolationError",
    "StorageError",
]
