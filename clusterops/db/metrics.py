from __future__ import annotations

import functools
import logging
import time
from typing import Any, Callable, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from ..errors import InvariantViolationError, NotFoundError, StorageError
from ..metrics.registry import (
    OPERATIONS_QUERY_LATENCY_SECONDS,
    OPERATIONS_QUERY_TOTAL,
)

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

STATUS_SUCCESS = "success"
STATUS_NOT_FOUND = "not_found"
STATUS_ERROR = "error"


def observe_operation_query(accessor: str, status: str, latency_s: float) -> None:
    """
    Record one call of an operation directory accessor.

    status is one of "success", "not_found" or "error".
    """
    OPERATIONS_QUERY_TOTAL.labels(accessor=accessor, status=status).inc()
    OPERATIONS_QUERY_LATENCY_SECONDS.labels(accessor=accessor).observe(latency_s)


def instrumented(accessor: str) -> Callable[[F], F]:
    """
    Decorate a directory accessor so every call is classified and recorded.

    Storage failures (any SQLAlchemyError, or a StorageError from a helper or
    nested accessor) are re-raised as StorageError naming this accessor,
    with the original exception chained. NotFoundError and
    InvariantViolationError pass through unchanged.
    """

    def decorator(fn: F) -> F:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start_time = time.monotonic()
            status = STATUS_SUCCESS
            try:
                return fn(*args, **kwargs)
            except NotFoundError:
                status = STATUS_NOT_FOUND
                raise
            except InvariantViolationError as exc:
                status = STATUS_ERROR
                logger.warning("Invariant violated in %s: %s", accessor, exc)
                raise
            except StorageError as exc:
                status = STATUS_ERROR
                if exc.accessor is None:
                    logger.warning("Storage failure in %s: %s", accessor, exc)
                    raise StorageError(exc.message, accessor) from exc.__cause__
                if exc.accessor != accessor:
                    # Failed inside a nested accessor; attribute it to this call too.
                    raise StorageError(str(exc), accessor) from exc
                raise
            except SQLAlchemyError as exc:
                status = STATUS_ERROR
                logger.warning("Storage failure in %s: %s", accessor, exc)
                raise StorageError(str(exc), accessor) from exc
            except Exception:
                status = STATUS_ERROR
                raise
            finally:
                observe_operation_query(accessor, status, time.monotonic() - start_time)

        return wrapper  # type: ignore[return-value]

    return decorator
