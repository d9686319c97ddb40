#!/usr/bin/env python3
"""
exceptions.py
--------------------
Custom exception classes for the gallery data store.

This module defines the hierarchy of exceptions raised by the persistence
engine. Only the bounded optimistic-concurrency retry is handled inside the
store; everything else propagates to the caller as one of these types.

Exception Hierarchy:
    Exception (built-in)
    ├── DatabaseError - Base for all database-related errors
    │   ├── ConcurrencyConflictError - Retry bound exhausted on a stale row
    │   ├── NotFoundError - A referenced row is absent
    │   └── ConstraintViolationError - Integrity/uniqueness violation
    └── ValidationError - Invalid or missing arguments

Usage:
    from gallerydb.core.exceptions import DatabaseError, ValidationError

    try:
        db.save_album(album)
    except ValidationError as e:
        logger.error(f"Invalid album: {e}")
    except ConcurrencyConflictError as e:
        logger.error(f"Gave up after repeated conflicts: {e}")
"""


class DatabaseError(Exception):
    """
    Base exception for database-related errors.

    Raised when database operations fail due to connection issues,
    query errors, integrity violations, or other database problems.

    Catch this to handle any database error, or catch specific
    subclasses for more granular error handling.

    Examples:
        >>> raise DatabaseError("Connection to database failed")

    See Also:
        ConcurrencyConflictError, NotFoundError, ConstraintViolationError
    """

    pass


class ConcurrencyConflictError(DatabaseError):
    """
    Exception for optimistic-concurrency conflicts that could not be resolved.

    Raised by the unit of work once a save has hit a stale row on every
    permitted attempt. The original SQLAlchemy ``StaleDataError`` is kept
    as ``__cause__``.

    Attributes:
        attempts: Number of save attempts made before giving up

    Examples:
        >>> raise ConcurrencyConflictError("Save failed after 11 attempts", 11)
    """

    def __init__(self, message: str, attempts: int = 0) -> None:
        super().__init__(message)
        self.attempts = attempts


class NotFoundError(DatabaseError):
    """
    Exception for referenced rows that do not exist.

    Raised instead of silently ignoring a missing row:
    - Updating an album or media object that was deleted
    - Updating a metadata item whose row is gone
    - Saving a media object whose parent album row is absent
    - Deleting an event that is not in the log

    Examples:
        >>> raise NotFoundError("No Album found with id: 42")
    """

    pass


class ConstraintViolationError(DatabaseError):
    """
    Exception for integrity constraint violations.

    Typically a duplicate tag inserted by another process between our
    existence check and our insert, or a foreign key that the store refused.

    Examples:
        >>> raise ConstraintViolationError("Data integrity violation: UNIQUE constraint failed: tags.name")
    """

    pass


class ValidationError(Exception):
    """
    Exception for data validation failures.

    Raised when input data fails validation checks:
    - None passed where an album/media object/metadata item is required
    - Missing required fields
    - Metadata item with no owning album or media object

    Examples:
        >>> raise ValidationError("album cannot be None")
        >>> raise ValidationError("Required field 'name' missing or empty")
    """

    pass
