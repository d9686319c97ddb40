#!/usr/bin/env python3
"""
unit_of_work.py
--------------------
Session wrapper that stages changes and saves them atomically.

Every mapped row carries a ``version_id`` column. When a save hits a row
that someone else changed or deleted, SQLAlchemy raises ``StaleDataError``
and the whole transaction is rolled back. The unit of work then reloads
the conflicting rows, puts the caller's values back on top of the fresh
ones (the caller wins) and tries again, up to a fixed bound.

Key Features:
    - Stage inserts, updates and deletes on one session
    - One atomic commit per save()
    - Bounded client-wins retry on optimistic-concurrency conflicts
    - IntegrityError translated to ConstraintViolationError

Usage:
    uow = UnitOfWork(session, logger)
    row = uow.find(Album, 42)
    row.directory_name = "summer"
    uow.save()
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Type, TypeVar

# --- Third party imports ---
from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError, InvalidRequestError
from sqlalchemy.orm import Query, Session
from sqlalchemy.orm.attributes import flag_modified
from sqlalchemy.orm.exc import StaleDataError

# --- Local imports ---
from gallerydb.core.exceptions import (
    ConcurrencyConflictError,
    ConstraintViolationError,
    NotFoundError,
)
from gallerydb.core.logging_manager import GalleryLogger, safe_logger

T = TypeVar("T")

# Retries allowed after the first attempt
MAX_CONFLICT_RETRIES = 10


class SaveState(Enum):
    """Outcome of one save attempt."""

    DONE = "done"
    RETRY = "retry"
    RAISE = "raise"


def next_save_state(
    attempt: int, conflict: bool, max_retries: int = MAX_CONFLICT_RETRIES
) -> SaveState:
    """
    Decide what to do after a save attempt.

    Args:
        attempt: 1-based number of the attempt that just finished
        conflict: Whether that attempt hit a stale row
        max_retries: Retries allowed after the first attempt

    Returns:
        DONE when there was no conflict, RETRY while attempts remain,
        RAISE once ``max_retries + 1`` attempts have all conflicted

    Examples:
        >>> next_save_state(1, conflict=True)
        <SaveState.RETRY: 'retry'>
        >>> next_save_state(11, conflict=True)
        <SaveState.RAISE: 'raise'>
    """
    if not conflict:
        return SaveState.DONE
    if attempt > max_retries:
        return SaveState.RAISE
    return SaveState.RETRY


@dataclass
class _PendingChanges:
    """Column values staged by the caller, captured before a commit."""

    dirty: List[tuple] = field(default_factory=list)
    new: List[tuple] = field(default_factory=list)
    deleted: List[Any] = field(default_factory=list)


class UnitOfWork:
    """
    Stages changes on one session and commits them as a unit.

    The session must be created with ``autoflush=False`` so that nothing
    reaches the database before save() and ``expire_on_commit=False`` so
    saved rows stay usable afterwards.

    Attributes:
        session: Session owned by this logical operation
        logger: Optional logger for retry and failure reporting
        max_retries: Conflict retries allowed after the first attempt
    """

    def __init__(
        self,
        session: Session,
        logger: Optional[GalleryLogger] = None,
        max_retries: int = MAX_CONFLICT_RETRIES,
    ) -> None:
        self.session = session
        self.logger = logger
        self.max_retries = max_retries

    # -------------------------------------------------------------------------
    # Staging
    # -------------------------------------------------------------------------

    def add(self, entity: T) -> T:
        """Stage a new row for insertion."""
        self.session.add(entity)
        return entity

    def delete(self, entity: Any) -> None:
        """Stage a row for deletion."""
        self.session.delete(entity)

    def mark_modified(self, entity: Any) -> None:
        """
        Flag every loaded, non-key column of a row as changed.

        The next save writes all of them, even if their values equal the
        stored ones.
        """
        state = inspect(entity)
        version_key = _version_key(state.mapper)
        for attr in state.mapper.column_attrs:
            if attr.key == version_key or attr.columns[0].primary_key:
                continue
            if attr.key in state.dict:
                flag_modified(entity, attr.key)

    def upsert(self, entity: T, is_new: bool) -> T:
        """
        Stage a row as new or as fully modified.

        Args:
            entity: ORM row
            is_new: Insert when True, update every column otherwise

        Returns:
            The staged row
        """
        self.session.add(entity)
        if not is_new:
            self.mark_modified(entity)
        return entity

    def find(self, model: Type[T], key: Any) -> Optional[T]:
        """Get a row by primary key, or None."""
        return self.session.get(model, key)

    def query(self, model: Type[T], *criteria: Any) -> Query:
        """Build a query over a model with optional filter criteria."""
        query = self.session.query(model)
        if criteria:
            query = query.filter(*criteria)
        return query

    # -------------------------------------------------------------------------
    # Saving
    # -------------------------------------------------------------------------

    def save(self) -> None:
        """
        Commit every staged change in one transaction.

        On a concurrency conflict the transaction is rolled back, the
        conflicting rows are reloaded, the caller's values are applied
        again and the commit is retried.

        Raises:
            ConcurrencyConflictError: If every permitted attempt conflicted
            ConstraintViolationError: If the store rejected a constraint
            NotFoundError: If a modified row vanished while reloading
        """
        log = safe_logger(self.logger)
        attempt = 0

        while True:
            attempt += 1
            pending = self._capture_pending()

            try:
                self.session.commit()
                state = SaveState.DONE
                error: Optional[StaleDataError] = None
            except StaleDataError as e:
                self.session.rollback()
                state = next_save_state(attempt, True, self.max_retries)
                error = e
            except IntegrityError as e:
                self.session.rollback()
                raise ConstraintViolationError(
                    f"Data integrity violation: {e.orig}"
                ) from e
            except Exception:
                self.session.rollback()
                raise

            if state is SaveState.DONE:
                if attempt > 1:
                    log.log_conflict_resolved(attempt)
                return

            if state is SaveState.RAISE:
                conflict = ConcurrencyConflictError(
                    f"Save failed after {attempt} attempts: {error}", attempts=attempt
                )
                log.log_conflict_exhausted(conflict, attempt)
                raise conflict from error

            log.log_conflict_retry(attempt, self.max_retries, error)
            self._restage(pending)

    def _capture_pending(self) -> _PendingChanges:
        """Record the staged column values before a commit."""
        pending = _PendingChanges()

        for obj in self.session.dirty:
            state = inspect(obj)
            version_key = _version_key(state.mapper)
            changed = {
                attr.key: state.dict[attr.key]
                for attr in state.mapper.column_attrs
                if attr.key != version_key
                and attr.key in state.dict
                and state.attrs[attr.key].history.has_changes()
            }
            if changed:
                pending.dirty.append((obj, state.identity, changed))

        for obj in self.session.new:
            state = inspect(obj)
            values = {
                attr.key: state.dict[attr.key]
                for attr in state.mapper.column_attrs
                if attr.key in state.dict
            }
            pending.new.append((obj, values))

        pending.deleted = list(self.session.deleted)
        return pending

    def _restage(self, pending: _PendingChanges) -> None:
        """Reload conflicting rows and stage the caller's changes again."""
        for obj, identity, changed in pending.dirty:
            try:
                self.session.refresh(obj)
            except InvalidRequestError as e:
                # repr() would try to reload the deleted row
                raise NotFoundError(
                    f"{type(obj).__name__} {identity} was deleted while saving"
                ) from e
            for key, value in changed.items():
                setattr(obj, key, value)

        for obj, values in pending.new:
            state = inspect(obj)
            for attr in state.mapper.column_attrs:
                if attr.key in values:
                    setattr(obj, attr.key, values[attr.key])
                elif attr.key in state.dict:
                    delattr(obj, attr.key)
            self.session.add(obj)

        for obj in pending.deleted:
            try:
                self.session.refresh(obj)
            except InvalidRequestError:
                # Already gone, nothing left to delete
                self.session.expunge(obj)
                continue
            self.session.delete(obj)


def _version_key(mapper: Any) -> Optional[str]:
    """Attribute name of a mapper's version counter, if it has one."""
    if mapper.version_id_col is None:
        return None
    return mapper.get_property_by_column(mapper.version_id_col).key

