#!/usr/bin/env python3
"""
metadata_tag_manager.py
-----------------------
Keeps the MetadataTag junction rows of one metadata item in line with the
tags parsed from its value.

The reconciliation is a three-way diff between the desired tag list and
the junction rows already stored:

    1. Load the stored junction rows of the metadata item
    2. Every stored row whose tag is still wanted is left alone; every
       other row is queued for deletion
    3. Delete the queued rows
    4. Insert a row for every wanted tag that had none
    5. Save
    6. Delete the Tag row of each unlinked tag that nothing references
       any more

Step 2 compares tag text exactly, while step 6 looks for remaining
references case-insensitively. Both behaviors are pinned by tests.

Usage:
    sync_mgr = MetadataTagManager(session, logger)
    result = sync_mgr.sync(item_id, ["Vacation", "New York"], gallery_id=1)
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from gallerydb.core.logging_manager import GalleryLogger, safe_logger
from gallerydb.core.validators import DataValidator
from gallerydb.database.decorators import handle_db_errors, log_database_operation
from gallerydb.database.models import MetadataTag, Tag
from gallerydb.database.unit_of_work import MAX_CONFLICT_RETRIES
from .base_manager import BaseManager
from .tag_manager import TagManager


@dataclass
class TagSyncResult:
    """
    Outcome of one reconciliation.

    Attributes:
        added: Tags newly linked to the metadata item
        removed: Tags unlinked from the metadata item
        deleted_tags: Unlinked tags whose Tag row was deleted as orphan
    """

    added: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    deleted_tags: List[str] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.removed)


class MetadataTagManager(BaseManager):
    """Reconciles MetadataTag rows against desired tag lists."""

    def __init__(
        self,
        session: Session,
        logger: Optional[GalleryLogger] = None,
        max_retries: int = MAX_CONFLICT_RETRIES,
        tag_manager: Optional[TagManager] = None,
    ):
        super().__init__(session, logger, max_retries)
        self.tag_manager = tag_manager or TagManager(session, logger, max_retries)

    @handle_db_errors
    @log_database_operation("get_metadata_tags")
    def get_for_metadata(self, metadata_id: int) -> List[MetadataTag]:
        """Stored junction rows of one metadata item, ordered by tag."""
        return (
            self.session.query(MetadataTag)
            .filter(MetadataTag.metadata_id == metadata_id)
            .order_by(MetadataTag.tag_name)
            .all()
        )

    @handle_db_errors
    @log_database_operation("sync_metadata_tags")
    def sync(self, metadata_id: int, tags: Iterable[str], gallery_id: int) -> TagSyncResult:
        """
        Reconcile the junction rows of a metadata item with a tag list.

        Calling it again with the same list writes nothing.

        Args:
            metadata_id: Stored metadata item id
            tags: Desired tags (already parsed, see DataValidator.parse_tags)
            gallery_id: Gallery recorded on new junction rows

        Returns:
            TagSyncResult describing what changed
        """
        DataValidator.require(metadata_id, "metadata_id")
        DataValidator.require(gallery_id, "gallery_id")

        to_persist: List[str] = []
        for raw in tags:
            name = DataValidator.normalize_string(raw)
            if name and name not in to_persist:
                to_persist.append(name)

        to_unlink: List[MetadataTag] = []
        for row in self.get_for_metadata(metadata_id):
            if row.tag_name in to_persist:
                to_persist.remove(row.tag_name)
            else:
                to_unlink.append(row)

        result = TagSyncResult(
            added=list(to_persist),
            removed=[row.tag_name for row in to_unlink],
        )
        if not result.has_changes:
            return result

        # Tag rows must exist before junction rows can point at them
        self.tag_manager.ensure_tags_exist(to_persist)

        for row in to_unlink:
            self.uow.delete(row)
        for name in to_persist:
            self.uow.add(
                MetadataTag(metadata_id=metadata_id, tag_name=name, gallery_id=gallery_id)
            )
        self.uow.save()

        for name in result.removed:
            still_referenced = (
                self.session.query(MetadataTag.metadata_id)
                .filter(func.lower(MetadataTag.tag_name) == func.lower(name))
                .first()
                is not None
            )
            if still_referenced:
                continue
            tag = self.session.get(Tag, name)
            if tag is not None:
                self.uow.delete(tag)
                result.deleted_tags.append(name)

        if result.deleted_tags:
            self.uow.save()

        safe_logger(self.logger).log_debug(
            "Metadata tags synchronized",
            {
                "metadata_id": metadata_id,
                "added": result.added,
                "removed": result.removed,
                "deleted_tags": result.deleted_tags,
            },
        )
        return result
