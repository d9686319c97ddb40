"""
Database Models Package
------------------------

SQLAlchemy ORM models for the gallery database.

This package provides a modular organization of database models:
- base: Declarative base
- enums: MetadataItemName, EventType
- gallery: Gallery, Album, MediaObject
- metadata: MetadataItem, Tag, MetadataTag
- events: AppEvent

Usage:
    from gallerydb.database.models import Album, MetadataItem, Tag
"""
# Base classes
from .base import Base

# Enumerations
from .enums import EventType, MetadataItemName

# Gallery hierarchy
from .gallery import Album, Gallery, MediaObject

# Metadata and tags
from .metadata import MetadataItem, MetadataTag, Tag

# Event log
from .events import AppEvent

__all__ = [
    # Base
    "Base",
    # Enums
    "EventType",
    "MetadataItemName",
    # Gallery hierarchy
    "Gallery",
    "Album",
    "MediaObject",
    # Metadata
    "MetadataItem",
    "Tag",
    "MetadataTag",
    # Events
    "AppEvent",
]
