#!/usr/bin/env python3
"""
Gallery Database Package
------------------------
Persistence layer of the gallery store.

Modules:
- models: SQLAlchemy ORM models
- unit_of_work: Atomic saves with bounded optimistic-concurrency retry
- managers: Album, media object, metadata, tag and event managers
- manager: GalleryDB entry point
- cli: Command-line maintenance tools

Usage:
    from gallerydb.database.manager import GalleryDB
"""

from gallerydb.core.exceptions import (
    ConcurrencyConflictError,
    ConstraintViolationError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from .decorators import handle_db_errors, log_database_operation

__all__ = [
    # Exceptions
    "DatabaseError",
    "ConcurrencyConflictError",
    "NotFoundError",
    "ConstraintViolationError",
    "ValidationError",
    # Decorators
    "log_database_operation",
    "handle_db_errors",
]
