#!/usr/bin/env python3
"""
album_manager.py
--------------------
Saves and deletes albums, including whole album subtrees.

Deleting an album removes, in one save:
    - the metadata rows (and their tag junction rows) of the album, of
      every descendant album and of every media object inside them
    - the album row itself; the store cascades the delete to descendant
      album rows and to media object rows

and then sweeps tags left without references.

Descendants are taken from the in-memory album graph; callers working on
a graph that may be stale should reload it first.

Usage:
    album_mgr = AlbumManager(session, logger)
    album_mgr.save(album)
    album_mgr.delete(album)
"""
from __future__ import annotations

from typing import List

from sqlalchemy import select

from gallerydb.core.exceptions import ValidationError
from gallerydb.core.logging_manager import safe_logger
from gallerydb.core.validators import DataValidator
from gallerydb.dataclasses import Album
from gallerydb.database.decorators import handle_db_errors, log_database_operation
from gallerydb.database.models import Album as AlbumRow
from gallerydb.database.models import MediaObject as MediaObjectRow
from gallerydb.database.models import MetadataItem as MetadataItemRow
from .gallery_object_manager import GalleryObjectManager


def collect_album_ids(album: Album) -> List[int]:
    """
    Collect the ids of an album and all of its saved descendant albums.

    Walks the in-memory graph with an explicit stack, so arbitrarily deep
    trees are fine.

    Args:
        album: Subtree root

    Returns:
        Ids in depth-first order, root first
    """
    ids: List[int] = []
    seen = set()
    stack = [album]
    while stack:
        current = stack.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        if not current.is_new:
            ids.append(current.id)
        stack.extend(reversed(current.child_albums()))
    return ids


class AlbumManager(GalleryObjectManager):
    """Persists Album objects and their metadata."""

    @handle_db_errors
    @log_database_operation("save_album")
    def save(self, album: Album) -> AlbumRow:
        """
        Insert or update an album, then save its metadata.

        Args:
            album: Album to save; a new album gets its id assigned

        Returns:
            The saved row

        Raises:
            ValidationError: If album is None or its parent is unsaved
            NotFoundError: If the album or its parent row does not exist
        """
        DataValidator.require(album, "album")

        parent_id = None
        if album.parent is not None:
            if album.parent.is_new:
                raise ValidationError("Parent album must be saved before its children")
            parent_id = self._require(AlbumRow, album.parent.id).id

        if album.is_new:
            row = AlbumRow(gallery_id=album.gallery_id)
        else:
            row = self._require(AlbumRow, album.id)

        row.parent_id = parent_id
        row.directory_name = album.directory_name
        row.thumbnail_media_object_id = album.thumbnail_media_object_id
        row.sort_by_meta_name = album.sort_by_meta_name
        row.sort_ascending = album.sort_ascending
        row.owned_by = album.owned_by
        row.owner_role_name = album.owner_role_name
        self._copy_common_fields(row, album)

        # Updates rewrite every column
        self.uow.upsert(row, is_new=album.is_new)
        self.uow.save()
        self._copy_back(album, row)

        self.metadata_manager.save_collection(album.metadata_items)
        return row

    @handle_db_errors
    @log_database_operation("delete_album")
    def delete(self, album: Album) -> int:
        """
        Delete an album with all of its descendants and their metadata.

        Args:
            album: Saved album to delete

        Returns:
            Number of orphaned tags swept afterwards

        Raises:
            ValidationError: If album is None or was never saved
            NotFoundError: If the album row no longer exists
        """
        DataValidator.require(album, "album")
        if album.is_new:
            raise ValidationError("Cannot delete an album that was never saved")

        row = self._require(AlbumRow, album.id)
        album_ids = collect_album_ids(album)

        media_ids = select(MediaObjectRow.id).where(MediaObjectRow.album_id.in_(album_ids))
        metadata_count = self._stage_metadata_delete(
            MetadataItemRow.album_id.in_(album_ids),
            MetadataItemRow.media_object_id.in_(media_ids),
        )

        # Descendant albums and media objects go with it through the store cascade
        self.uow.delete(row)
        self.uow.save()

        if album.parent is not None:
            album.parent.children = [
                child for child in album.parent.children if child is not album
            ]

        swept = self.tag_manager.delete_unused_tags()

        safe_logger(self.logger).log_cascade_delete(
            "Album",
            album.id,
            {
                "albums": len(album_ids),
                "metadata_items": metadata_count,
                "tags_swept": swept,
            },
        )
        return swept
