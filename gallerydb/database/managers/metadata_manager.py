#!/usr/bin/env python3
"""
metadata_manager.py
--------------------
Persists the metadata items of albums and media objects.

Only items that are dirty or marked for deletion are written. Each item is
classified as inserted, updated or deleted, the rows are saved in one
batch, generated ids are copied back onto the new items, and finally the
tag index is reconciled for every Tags and People item.

Key Features:
    - Batch save of a whole metadata collection
    - Id back-assignment through a positional correlation table
    - Tag index reconciliation after the rows exist
    - Junction rows removed before a metadata row is deleted

Usage:
    meta_mgr = MetadataManager(session, logger)
    summary = meta_mgr.save_collection(media_object.metadata_items)
    # {SaveAction.INSERTED: 2, SaveAction.UPDATED: 1, SaveAction.DELETED: 0}
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from gallerydb.core.exceptions import ValidationError
from gallerydb.core.logging_manager import GalleryLogger, safe_logger
from gallerydb.core.validators import DataValidator
from gallerydb.dataclasses import (
    Album,
    GalleryObject,
    MetadataItem,
    MetadataItemCollection,
)
from gallerydb.database.decorators import handle_db_errors, log_database_operation
from gallerydb.database.models import MetadataItem as MetadataItemRow
from gallerydb.database.models import MetadataItemName
from gallerydb.database.unit_of_work import MAX_CONFLICT_RETRIES
from .base_manager import BaseManager
from .metadata_tag_manager import MetadataTagManager
from .tag_manager import TagManager


class SaveAction(Enum):
    """What a save did to one metadata item."""

    INSERTED = "inserted"
    UPDATED = "updated"
    DELETED = "deleted"


class MetadataManager(BaseManager):
    """Saves in-memory metadata items to the metadata_items table."""

    def __init__(
        self,
        session: Session,
        logger: Optional[GalleryLogger] = None,
        max_retries: int = MAX_CONFLICT_RETRIES,
        tag_manager: Optional[TagManager] = None,
    ):
        super().__init__(session, logger, max_retries)
        self.tag_manager = tag_manager or TagManager(session, logger, max_retries)
        self.metadata_tags = MetadataTagManager(
            session, logger, max_retries, tag_manager=self.tag_manager
        )

    @handle_db_errors
    @log_database_operation("save_metadata_item")
    def save_item(self, item: MetadataItem) -> Dict[SaveAction, int]:
        """
        Save a single metadata item.

        Args:
            item: Item owned by a saved album or media object

        Returns:
            Count of items per SaveAction
        """
        DataValidator.require(item, "metadata item")
        return self.save_collection(MetadataItemCollection([item]))

    @handle_db_errors
    @log_database_operation("save_metadata_collection")
    def save_collection(self, collection: MetadataItemCollection) -> Dict[SaveAction, int]:
        """
        Save every dirty or deleted item of a collection.

        Args:
            collection: Metadata items to persist

        Returns:
            Count of items per SaveAction; empty when nothing needed saving

        Raises:
            ValidationError: If an item has no saved owner
            NotFoundError: If an updated item's row no longer exists
        """
        DataValidator.require(collection, "metadata collection")

        items = collection.get_items_to_save()
        if not items:
            return {}

        for item in items:
            self._check_owner(item)

        summary = {action: 0 for action in SaveAction}

        # Junction rows have no cascade, unlink them before staging deletes
        for item in items:
            if item.is_deleted and not item.is_new:
                self.metadata_tags.sync(item.metadata_id, [], item.gallery_object.gallery_id)

        correlation: Dict[int, Tuple[MetadataItem, MetadataItemRow]] = {}
        next_tmp_id = 0
        deleted: List[MetadataItem] = []

        for item in items:
            if item.is_deleted:
                if not item.is_new:
                    row = self._get_by_id(MetadataItemRow, item.metadata_id)
                    if row is not None:
                        self.uow.delete(row)
                deleted.append(item)
                summary[SaveAction.DELETED] += 1
            elif item.is_new:
                row = self.uow.add(self._new_row(item))
                next_tmp_id += 1
                correlation[next_tmp_id] = (item, row)
                summary[SaveAction.INSERTED] += 1
            else:
                row = self._require(MetadataItemRow, item.metadata_id)
                row.name = item.name
                row.value = item.value
                row.raw_value = item.raw_value
                summary[SaveAction.UPDATED] += 1

        self.uow.save()

        for tmp_id in sorted(correlation):
            item, row = correlation[tmp_id]
            item.metadata_id = row.id

        for item in deleted:
            item.gallery_object.metadata_items.remove(item)
            item.mark_saved()

        for item in items:
            if item.is_deleted:
                continue
            if item.is_tag_like:
                tags = DataValidator.parse_tags(item.value)
            else:
                # Name may have changed away from Tags/People
                tags = []
            self.metadata_tags.sync(item.metadata_id, tags, item.gallery_object.gallery_id)
            item.mark_saved()

        safe_logger(self.logger).log_debug(
            "Metadata saved", {action.value: count for action, count in summary.items()}
        )
        return summary

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _check_owner(item: MetadataItem) -> None:
        owner: Optional[GalleryObject] = item.gallery_object
        label = MetadataItemName(item.name).name
        if owner is None:
            raise ValidationError(f"Metadata item {label} has no owning album or media object")
        if owner.is_new:
            raise ValidationError(f"Owner of metadata item {label} must be saved before its metadata")

    @staticmethod
    def _new_row(item: MetadataItem) -> MetadataItemRow:
        owner = item.gallery_object
        row = MetadataItemRow(name=item.name, value=item.value, raw_value=item.raw_value)
        if isinstance(owner, Album):
            row.album_id = owner.id
        else:
            row.media_object_id = owner.id
        return row
