#!/usr/bin/env python3
"""
gallery_object_manager.py
-------------------------
Shared behavior of the album and media object managers.

Both kinds of gallery object own metadata rows that the store does not
cascade, carry the same audit columns, and finish a delete with an orphan
tag sweep. This module keeps that common ground in one place.
"""
from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from gallerydb.core.logging_manager import GalleryLogger
from gallerydb.dataclasses import GalleryObject
from gallerydb.database.models import MetadataItem as MetadataItemRow
from gallerydb.database.models import MetadataTag
from gallerydb.database.models.base import utc_now
from gallerydb.database.unit_of_work import MAX_CONFLICT_RETRIES
from .base_manager import BaseManager
from .metadata_manager import MetadataManager
from .tag_manager import TagManager


class GalleryObjectManager(BaseManager):
    """
    Base for managers of albums and media objects.

    Attributes:
        tag_manager: Tag table writer shared with the metadata manager
        metadata_manager: Saves the metadata collection of saved objects
    """

    def __init__(
        self,
        session: Session,
        logger: Optional[GalleryLogger] = None,
        max_retries: int = MAX_CONFLICT_RETRIES,
    ):
        super().__init__(session, logger, max_retries)
        self.tag_manager = TagManager(session, logger, max_retries)
        self.metadata_manager = MetadataManager(
            session, logger, max_retries, tag_manager=self.tag_manager
        )

    def _stage_metadata_delete(self, *owner_criteria: Any) -> int:
        """
        Stage the deletion of metadata rows and their junction rows.

        Args:
            *owner_criteria: Filters selecting metadata rows, OR-ed together

        Returns:
            Number of metadata rows staged for deletion
        """
        rows = self.session.query(MetadataItemRow).filter(or_(*owner_criteria)).all()
        if not rows:
            return 0

        row_ids = [row.id for row in rows]
        junctions = (
            self.session.query(MetadataTag)
            .filter(MetadataTag.metadata_id.in_(row_ids))
            .all()
        )
        for junction in junctions:
            self.uow.delete(junction)
        for row in rows:
            self.uow.delete(row)
        return len(rows)

    @staticmethod
    def _copy_common_fields(row: Any, obj: GalleryObject) -> None:
        """Copy sequence, audit and privacy fields onto a row."""
        row.seq = obj.seq
        row.created_by = obj.created_by
        row.last_modified_by = obj.last_modified_by
        row.date_last_modified = obj.date_last_modified or utc_now()
        row.is_private = obj.is_private
        if obj.date_added is not None:
            row.date_added = obj.date_added

    @staticmethod
    def _copy_back(obj: GalleryObject, row: Any) -> None:
        """Copy generated values of a saved row back onto the object."""
        obj.id = row.id
        obj.date_added = row.date_added
        obj.date_last_modified = row.date_last_modified
