#!/usr/bin/env python3
"""
managers package
--------------------
Managers for the gallery database.

Each manager works on the caller's session and writes through its own
UnitOfWork, inheriting from BaseManager.

Available Managers:
    BaseManager: Abstract base class with common utilities
    TagManager: Tag creation, orphan sweep and usage counts
    MetadataTagManager: Tag index reconciliation for one metadata item
    MetadataManager: Batch save of metadata collections
    AlbumManager: Album save and subtree delete
    MediaObjectManager: Media object save and delete
    EventManager: Application event log

Usage:
    from gallerydb.database.managers import AlbumManager, TagManager

    album_mgr = AlbumManager(session, logger)
    tag_mgr = TagManager(session, logger)
"""
from .base_manager import BaseManager
from .tag_manager import TagManager
from .metadata_tag_manager import MetadataTagManager, TagSyncResult
from .metadata_manager import MetadataManager, SaveAction
from .gallery_object_manager import GalleryObjectManager
from .album_manager import AlbumManager, collect_album_ids
from .media_object_manager import MediaObjectManager
from .event_manager import EventManager

__all__ = [
    "BaseManager",
    "TagManager",
    "MetadataTagManager",
    "TagSyncResult",
    "MetadataManager",
    "SaveAction",
    "GalleryObjectManager",
    "AlbumManager",
    "collect_album_ids",
    "MediaObjectManager",
    "EventManager",
]
