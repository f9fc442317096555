from __future__ import annotations


class ClusterOpsError(Exception):
    """Base exception for clusterops errors."""


class NotFoundError(ClusterOpsError):
    """No row matched where exactly one (or at least one) was expected."""


class InvariantViolationError(ClusterOpsError):
    """More than one row matched a key the schema declares unique."""


class StorageError(ClusterOpsError):
    """
    Failure reported by the underlying store (connectivity, syntax, constraint).

    ``accessor`` names the directory call that failed; it is None only while
    the error is still travelling up to that call. The original exception is
    always chained as ``__cause__``.
    """

    def __init__(self, message: str, accessor: str | None = None) -> None:
        super().__init__(f"{accessor}: {message}" if accessor else message)
        self.message = message
        self.accessor = accessor
