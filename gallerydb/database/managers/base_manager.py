#!/usr/bin/env python3
"""
base_manager.py
--------------------
Base manager providing common lookups and the shared unit of work.
All gallery managers inherit from this class.

Key Features:
    - One UnitOfWork per manager, bound to the caller's session
    - Generic get/count helpers
    - NotFoundError for required rows that are missing

Usage:
    Subclass BaseManager for each concern and stage changes through
    ``self.uow`` so that every write goes through the bounded
    optimistic-concurrency retry.

Example:
    class TagManager(BaseManager):
        def delete_unused_tags(self) -> int:
            for tag in self.get_unused():
                self.uow.delete(tag)
            self.uow.save()
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from abc import ABC
from typing import Any, List, Optional, Type, TypeVar

# --- Third party imports ---
from sqlalchemy.orm import Session

# --- Local imports ---
from gallerydb.core.exceptions import NotFoundError
from gallerydb.core.logging_manager import GalleryLogger
from gallerydb.database.unit_of_work import MAX_CONFLICT_RETRIES, UnitOfWork

T = TypeVar("T")


class BaseManager(ABC):
    """
    Abstract base manager shared by every gallery manager.

    Attributes:
        session: SQLAlchemy session for database operations
        logger: Optional logger for operation tracking
        uow: Unit of work staging and saving changes on ``session``
    """

    def __init__(
        self,
        session: Session,
        logger: Optional[GalleryLogger] = None,
        max_retries: int = MAX_CONFLICT_RETRIES,
    ):
        """
        Initialize the base manager.

        Args:
            session: SQLAlchemy session
            logger: Optional logger for operation tracking
            max_retries: Conflict retries allowed per save
        """
        self.session = session
        self.logger = logger
        self.max_retries = max_retries
        self.uow = UnitOfWork(session, logger, max_retries)

    # -------------------------------------------------------------------------
    # Core Helper Methods
    # -------------------------------------------------------------------------

    def _get_by_id(self, model_class: Type[T], entity_id: Any) -> Optional[T]:
        """
        Get entity by primary key.

        Args:
            model_class: ORM model class
            entity_id: The primary key

        Returns:
            Entity if found, None otherwise
        """
        return self.uow.find(model_class, entity_id)

    def _require(self, model_class: Type[T], entity_id: Any) -> T:
        """
        Get entity by primary key or fail.

        Raises:
            NotFoundError: If no row has that key
        """
        entity = self.uow.find(model_class, entity_id)
        if entity is None:
            raise NotFoundError(f"No {model_class.__name__} found with id: {entity_id}")
        return entity

    def _get_all(self, model_class: Type[T], *order_by: Any, **filters: Any) -> List[T]:
        """
        Get all entities of a type with optional filtering and ordering.

        Args:
            model_class: ORM model class
            *order_by: Column expressions to order by
            **filters: Equality filter conditions

        Returns:
            List of entities
        """
        query = self.session.query(model_class)
        if filters:
            query = query.filter_by(**filters)
        if order_by:
            query = query.order_by(*order_by)
        return query.all()
