#!/usr/bin/env python3
"""
decorators.py
--------------------
Shared decorators for manager operations.

Managers stack them as::

    @handle_db_errors
    @log_database_operation("delete_album")
    def delete(self, album): ...

so that failures are logged with their raw type before translation.
"""
import time
from functools import wraps
from typing import Callable

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from gallerydb.core.exceptions import (
    ConstraintViolationError,
    DatabaseError,
    ValidationError,
)
from gallerydb.core.logging_manager import safe_logger


def log_database_operation(operation_name: str):
    """
    Decorator to log manager operations with timing and context.

    Logs a debug line on entry, an operation line on success and the
    error with its duration on failure. The wrapped method's ``self`` is
    expected to carry a ``logger`` attribute (None is allowed).

    Args:
        operation_name: Name of the operation being logged

    Returns:
        Decorator function
    """

    def decorator(function: Callable) -> Callable:
        @wraps(function)
        def wrapper(self, *args, **kwargs):
            log = safe_logger(getattr(self, "logger", None))
            started = time.perf_counter()

            log.log_debug(
                f"Starting {operation_name}",
                {"args_count": len(args), "kwargs_keys": sorted(kwargs)},
            )

            try:
                result = function(self, *args, **kwargs)
            except Exception as e:
                log.log_error(
                    e,
                    {
                        "operation": operation_name,
                        "duration_seconds": round(time.perf_counter() - started, 6),
                    },
                )
                raise

            log.log_operation(
                f"{operation_name}_completed",
                {"duration_seconds": round(time.perf_counter() - started, 6)},
            )
            return result

        return wrapper

    return decorator


def handle_db_errors(function: Callable) -> Callable:
    """
    Decorator to translate raw SQLAlchemy errors into store exceptions.

    Exceptions already raised as DatabaseError subclasses or
    ValidationError pass through unchanged.

    Args:
        function: Function to wrap

    Returns:
        Wrapped function with error handling
    """

    @wraps(function)
    def wrapper(*args, **kwargs):
        try:
            return function(*args, **kwargs)
        except (DatabaseError, ValidationError):
            raise
        except IntegrityError as e:
            raise ConstraintViolationError(f"Data integrity violation: {e.orig}") from e
        except SQLAlchemyError as e:
            raise DatabaseError(f"Database operation failed: {e}") from e

    return wrapper
