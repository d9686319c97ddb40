#!/usr/bin/env python3
"""
tag_manager.py
--------------------
Manages the Tag table: creating tags on demand and sweeping orphans.

Tags are shared by every gallery and keyed by their text. A tag row only
exists while at least one MetadataTag junction row references it.

Key Features:
    - Race-free creation of missing tags behind a process-wide lock
    - Full sweep of unreferenced tags
    - Per-gallery tag usage counts for Tags and People

Usage:
    tag_mgr = TagManager(session, logger)

    # Make sure tags exist before linking them
    tag_mgr.ensure_tags_exist(["Vacation", "New York"])

    # Remove every tag nobody references any more
    removed = tag_mgr.delete_unused_tags()

    # Most used tags in gallery 1
    counts = tag_mgr.get_tag_counts(1)
"""
import threading
from typing import Dict, Iterable, List, Optional

from sqlalchemy import desc, exists, func

from gallerydb.core.exceptions import ValidationError
from gallerydb.core.logging_manager import safe_logger
from gallerydb.core.validators import DataValidator
from gallerydb.database.decorators import handle_db_errors, log_database_operation
from gallerydb.database.models import MetadataItem, MetadataItemName, MetadataTag, Tag
from .base_manager import BaseManager


class TagManager(BaseManager):
    """
    Manages Tag table operations.

    Tag text is compared exactly: "Vacation" and "vacation" are two tags.
    """

    # Serializes check-then-insert of tag rows across threads
    _shared_lock = threading.Lock()

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("tag_exists")
    def exists(self, tag_name: str) -> bool:
        """
        Check if a tag exists.

        Args:
            tag_name: The tag text to check (trimmed, exact case)

        Returns:
            True if tag exists, False otherwise
        """
        return self.get(tag_name) is not None

    @handle_db_errors
    @log_database_operation("get_tag")
    def get(self, tag_name: str) -> Optional[Tag]:
        """
        Retrieve a tag by name.

        Args:
            tag_name: The tag text to retrieve

        Returns:
            Tag object if found, None otherwise
        """
        normalized = DataValidator.normalize_string(tag_name)
        if not normalized:
            return None

        return self.session.query(Tag).filter(Tag.name == normalized).first()

    @handle_db_errors
    @log_database_operation("get_all_tags")
    def get_all(self) -> List[Tag]:
        """Retrieve all tags ordered by name."""
        return self._get_all(Tag, Tag.name)

    @handle_db_errors
    @log_database_operation("get_unused_tags")
    def get_unused(self) -> List[Tag]:
        """Retrieve the tags no MetadataTag row references."""
        referenced = exists().where(MetadataTag.tag_name == Tag.name)
        return self.session.query(Tag).filter(~referenced).order_by(Tag.name).all()

    @handle_db_errors
    @log_database_operation("get_tag_counts")
    def get_tag_counts(
        self,
        gallery_id: int,
        name: MetadataItemName = MetadataItemName.TAGS,
        search_term: Optional[str] = None,
    ) -> Dict[str, int]:
        """
        Count how often each tag is used within a gallery.

        Args:
            gallery_id: Gallery to count in
            name: TAGS or PEOPLE
            search_term: Optional case-insensitive substring filter

        Returns:
            Mapping tag -> reference count, most used first, ties by name

        Raises:
            ValidationError: If name is not a tag-like metadata name
        """
        name = MetadataItemName(name)
        if not name.is_tag_like():
            raise ValidationError(f"{name.name} values are not indexed as tags")

        usage = func.count(MetadataTag.metadata_id).label("usage")
        query = (
            self.session.query(MetadataTag.tag_name, usage)
            .join(MetadataItem, MetadataItem.id == MetadataTag.metadata_id)
            .filter(MetadataTag.gallery_id == gallery_id, MetadataItem.name == name)
        )

        term = DataValidator.normalize_string(search_term)
        if term:
            query = query.filter(func.lower(MetadataTag.tag_name).contains(term.lower()))

        rows = query.group_by(MetadataTag.tag_name).order_by(desc(usage), MetadataTag.tag_name)
        return {tag_name: count for tag_name, count in rows}

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("ensure_tags_exist")
    def ensure_tags_exist(self, names: Iterable[str]) -> List[str]:
        """
        Insert the tags that are not stored yet.

        The existence check and the insert run inside one process-wide
        critical section. Anything already staged on the session is saved
        together with the new tags.

        Args:
            names: Tag texts; trimmed, empties and repeats ignored

        Returns:
            The names that were inserted

        Raises:
            ConstraintViolationError: If another process inserted one of the
                tags between our check and our insert
        """
        wanted: List[str] = []
        for raw in names:
            name = DataValidator.normalize_string(raw)
            if name and name not in wanted:
                wanted.append(name)

        if not wanted:
            return []

        with self._shared_lock:
            stored = {
                tag_name
                for (tag_name,) in self.session.query(Tag.name).filter(Tag.name.in_(wanted))
            }
            missing = [name for name in wanted if name not in stored]

            for name in missing:
                self.uow.add(Tag(name=name))
            if missing:
                self.uow.save()

        if missing:
            safe_logger(self.logger).log_debug("Tags created", {"tags": missing})
        return missing

    @handle_db_errors
    @log_database_operation("delete_unused_tags")
    def delete_unused_tags(self) -> int:
        """
        Delete every tag that no MetadataTag row references.

        Returns:
            Number of tags deleted
        """
        unused = self.get_unused()
        for tag in unused:
            self.uow.delete(tag)
        if unused:
            self.uow.save()
        safe_logger(self.logger).log_tag_sweep(len(unused))
        return len(unused)
