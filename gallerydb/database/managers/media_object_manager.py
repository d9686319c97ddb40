#!/usr/bin/env python3
"""
media_object_manager.py
-----------------------
Saves and deletes media objects.

A media object always lives in a saved album. Deleting one removes its
metadata rows and their tag junction rows explicitly, deletes the media
object row and sweeps tags left without references.

Usage:
    media_mgr = MediaObjectManager(session, logger)
    media_mgr.save(photo)
    media_mgr.delete(photo)
"""
from __future__ import annotations

from gallerydb.core.exceptions import ValidationError
from gallerydb.core.logging_manager import safe_logger
from gallerydb.core.validators import DataValidator
from gallerydb.dataclasses import MediaObject
from gallerydb.database.decorators import handle_db_errors, log_database_operation
from gallerydb.database.models import Album as AlbumRow
from gallerydb.database.models import MediaObject as MediaObjectRow
from gallerydb.database.models import MetadataItem as MetadataItemRow
from .gallery_object_manager import GalleryObjectManager


class MediaObjectManager(GalleryObjectManager):
    """Persists MediaObject objects and their metadata."""

    @handle_db_errors
    @log_database_operation("save_media_object")
    def save(self, media_object: MediaObject) -> MediaObjectRow:
        """
        Insert or update a media object, then save its metadata.

        Args:
            media_object: Media object inside a saved album

        Returns:
            The saved row

        Raises:
            ValidationError: If media_object is None, has no album or its
                album was never saved
            NotFoundError: If the media object or album row does not exist
        """
        DataValidator.require(media_object, "media object")
        album = media_object.parent
        if album is None:
            raise ValidationError("Media object must belong to an album")
        if album.is_new:
            raise ValidationError("Album must be saved before its media objects")
        album_id = self._require(AlbumRow, album.id).id

        if media_object.is_new:
            row = MediaObjectRow(album_id=album_id)
        else:
            row = self._require(MediaObjectRow, media_object.id)

        row.album_id = album_id
        for prefix in ("thumbnail", "optimized", "original"):
            descriptor = getattr(media_object, prefix)
            setattr(row, f"{prefix}_filename", descriptor.filename)
            setattr(row, f"{prefix}_width", descriptor.width)
            setattr(row, f"{prefix}_height", descriptor.height)
            setattr(row, f"{prefix}_size_kb", descriptor.size_kb)
        row.external_html_source = media_object.external_html_source
        row.external_type = media_object.external_type
        self._copy_common_fields(row, media_object)

        self.uow.upsert(row, is_new=media_object.is_new)
        self.uow.save()
        self._copy_back(media_object, row)

        self.metadata_manager.save_collection(media_object.metadata_items)
        return row

    @handle_db_errors
    @log_database_operation("delete_media_object")
    def delete(self, media_object: MediaObject) -> int:
        """
        Delete a media object and its metadata.

        Args:
            media_object: Saved media object to delete

        Returns:
            Number of orphaned tags swept afterwards

        Raises:
            ValidationError: If media_object is None or was never saved
            NotFoundError: If the media object row no longer exists
        """
        DataValidator.require(media_object, "media object")
        if media_object.is_new:
            raise ValidationError("Cannot delete a media object that was never saved")

        row = self._require(MediaObjectRow, media_object.id)
        metadata_count = self._stage_metadata_delete(
            MetadataItemRow.media_object_id == media_object.id
        )
        self.uow.delete(row)
        self.uow.save()

        if media_object.parent is not None:
            media_object.parent.children = [
                child for child in media_object.parent.children if child is not media_object
            ]

        swept = self.tag_manager.delete_unused_tags()

        safe_logger(self.logger).log_cascade_delete(
            "Media object",
            media_object.id,
            {
                "metadata_items": metadata_count,
                "tags_swept": swept,
            },
        )
        return swept
