"""
In-memory gallery objects.

Usage:
    from gallerydb.dataclasses import Album, MediaObject, MetadataItem
"""
from .metadata_item import UNASSIGNED_ID, MetadataItem, MetadataItemCollection
from .gallery_object import Album, FileDescriptor, GalleryObject, MediaObject

__all__ = [
    "UNASSIGNED_ID",
    "MetadataItem",
    "MetadataItemCollection",
    "GalleryObject",
    "Album",
    "MediaObject",
    "FileDescriptor",
]
