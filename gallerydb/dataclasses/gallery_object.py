#!/usr/bin/env python3
"""
gallery_object.py
-----------------
In-memory album and media object graph.

These dataclasses are what callers build and mutate; the album and media
object managers translate them to and from ORM rows. A freshly constructed
object carries UNASSIGNED_ID until its first save assigns the stored id.

Example:
    root = Album(gallery_id=1, directory_name="")
    trip = Album(gallery_id=1, directory_name="trip")
    root.add_child(trip)
    photo = MediaObject(gallery_id=1, original=FileDescriptor("beach.jpg"))
    trip.add_child(photo)
    photo.add_metadata(MetadataItemName.TAGS, "Vacation, Beach")
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Union

from gallerydb.dataclasses.metadata_item import (
    UNASSIGNED_ID,
    MetadataItem,
    MetadataItemCollection,
)
from gallerydb.database.models.enums import MetadataItemName


@dataclass
class FileDescriptor:
    """A file backing one rendition (thumbnail, optimized or original)."""

    filename: str = ""
    width: int = 0
    height: int = 0
    size_kb: int = 0


@dataclass(eq=False)
class GalleryObject:
    """
    Common state of albums and media objects.

    Attributes:
        gallery_id: Gallery the object lives in
        id: Stored id, UNASSIGNED_ID until first saved
        parent: Containing album (None only for a root album)
        seq: Position among siblings
        created_by, date_added, last_modified_by, date_last_modified: Audit
        is_private: Hidden from anonymous users
        metadata_items: Metadata owned by this object
    """

    gallery_id: int
    id: int = UNASSIGNED_ID
    parent: Optional["Album"] = field(default=None, repr=False)
    seq: int = 0
    created_by: str = ""
    date_added: Optional[datetime] = None
    last_modified_by: str = ""
    date_last_modified: Optional[datetime] = None
    is_private: bool = False
    metadata_items: MetadataItemCollection = field(
        default_factory=MetadataItemCollection, repr=False
    )

    @property
    def is_new(self) -> bool:
        """Whether the object has never been saved."""
        return self.id == UNASSIGNED_ID

    def add_metadata(
        self,
        name: MetadataItemName,
        value: str,
        raw_value: Optional[str] = None,
    ) -> MetadataItem:
        """
        Create a new metadata item owned by this object.

        Args:
            name: Kind of metadata
            value: Display value
            raw_value: Optional unformatted value

        Returns:
            The new (dirty) item, already added to ``metadata_items``
        """
        item = MetadataItem(name=name, value=value, raw_value=raw_value, gallery_object=self)
        self.metadata_items.add(item)
        return item


@dataclass(eq=False)
class Album(GalleryObject):
    """
    An album and its direct children.

    ``children`` mixes child albums and media objects, in insertion order.
    """

    directory_name: str = ""
    thumbnail_media_object_id: int = 0
    sort_by_meta_name: MetadataItemName = MetadataItemName.NOT_SPECIFIED
    sort_ascending: bool = True
    owned_by: str = ""
    owner_role_name: str = ""
    children: List[GalleryObject] = field(default_factory=list, repr=False)

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def add_child(self, child: Union["Album", "MediaObject"]) -> None:
        """Attach a child album or media object to this album."""
        child.parent = self
        if not any(existing is child for existing in self.children):
            self.children.append(child)

    def child_albums(self) -> List["Album"]:
        return [child for child in self.children if isinstance(child, Album)]

    def child_media_objects(self) -> List["MediaObject"]:
        return [child for child in self.children if isinstance(child, MediaObject)]


@dataclass(eq=False)
class MediaObject(GalleryObject):
    """
    A single asset in an album.

    Attributes:
        thumbnail: Small preview rendition
        optimized: Web-sized rendition
        original: Original upload
        external_html_source: Embed code for externally hosted media
        external_type: Mime category of the external media
    """

    thumbnail: FileDescriptor = field(default_factory=FileDescriptor)
    optimized: FileDescriptor = field(default_factory=FileDescriptor)
    original: FileDescriptor = field(default_factory=FileDescriptor)
    external_html_source: str = ""
    external_type: str = ""
