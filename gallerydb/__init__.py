"""
Gallery Persistence Package
===========================

Persistence core of a media gallery: albums nested in albums, media
objects inside albums, descriptive metadata on both, and a normalized tag
index built from Tags and People metadata.

Main Components:
    - dataclasses: In-memory album / media object / metadata graph
    - database: SQLAlchemy models, unit of work, managers and CLI
    - core: Logging, validation, paths and exceptions

Primary Interfaces:
    - gallerydb.database.manager.GalleryDB: Main database interface
    - gallerydb.database.cli: Database management CLI

Example Usage:
    >>> from gallerydb.database.manager import GalleryDB
    >>> from gallerydb.dataclasses import Album
    >>> db = GalleryDB("gallery.db")
    >>> root = db.save_album(Album(gallery_id=db.create_gallery("Family")))
"""

__version__ = "1.0.0"
