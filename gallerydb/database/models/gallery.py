"""
Gallery Models
--------------

Hierarchical container models for the gallery database.

Models:
    - Gallery: Top-level container of albums
    - Album: Hierarchical container of media objects and child albums
    - MediaObject: A single asset belonging to exactly one album

Cascade rules declared in the schema:
    - Album -> child Album: ON DELETE CASCADE (parent_id)
    - Album -> MediaObject: ON DELETE CASCADE (album_id)
    - Album/MediaObject -> MetadataItem: none, metadata rows must be
      removed explicitly before their owner

The relationships use ``passive_deletes="all"`` so the ORM never nulls out
or deletes child rows on its own when a parent is deleted.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

# --- Third party imports ---
from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

# --- Local imports ---
from .base import Base, utc_now
from .enums import MetadataItemName

if TYPE_CHECKING:
    from .metadata import MetadataItem


# ----- Gallery -----
class Gallery(Base):
    """
    Top-level container of albums.

    Attributes:
        id: Primary key
        description: Human-readable name of the gallery
        is_template: Whether this gallery only holds template settings
        date_added: Creation timestamp
    """

    __tablename__ = "galleries"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    description: Mapped[str] = mapped_column(String(1000), nullable=False, default="")
    is_template: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    date_added: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    version_id: Mapped[int] = mapped_column(Integer, nullable=False)

    albums: Mapped[List["Album"]] = relationship(
        "Album", back_populates="gallery", passive_deletes="all"
    )

    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        return f"<Gallery(id={self.id}, description='{self.description}')>"


# ----- Album -----
class Album(Base):
    """
    Hierarchical container of media objects and child albums.

    A null ``parent_id`` marks the root album of a gallery. Children form a
    tree; deleting an album row makes the store delete its child album rows
    and media object rows, but never its metadata rows.

    Attributes:
        id: Primary key
        gallery_id: Owning gallery
        parent_id: Parent album (None for the root album)
        directory_name: Directory holding the album's files
        thumbnail_media_object_id: Media object used as album thumbnail
        sort_by_meta_name: Metadata item the album's contents are sorted by
        sort_ascending: Sort direction
        seq: Position among sibling albums
        created_by, date_added, last_modified_by, date_last_modified: Audit
        owned_by, owner_role_name: Ownership
        is_private: Hidden from anonymous users

    Relationships:
        gallery: Many-to-one with Gallery
        parent / children: Self-referential album tree
        media_objects: One-to-many with MediaObject
        metadata_items: One-to-many with MetadataItem
    """

    __tablename__ = "albums"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    gallery_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("galleries.id"), nullable=False, index=True
    )
    parent_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("albums.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    directory_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    thumbnail_media_object_id: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    sort_by_meta_name: Mapped[MetadataItemName] = mapped_column(
        SQLEnum(MetadataItemName, native_enum=False, length=40),
        nullable=False,
        default=MetadataItemName.NOT_SPECIFIED,
    )
    sort_ascending: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    seq: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_by: Mapped[str] = mapped_column(String(256), nullable=False, default="")
    date_added: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    last_modified_by: Mapped[str] = mapped_column(String(256), nullable=False, default="")
    date_last_modified: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    owned_by: Mapped[str] = mapped_column(String(256), nullable=False, default="")
    owner_role_name: Mapped[str] = mapped_column(String(256), nullable=False, default="")
    is_private: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    version_id: Mapped[int] = mapped_column(Integer, nullable=False)

    # ---- Relationships ----
    gallery: Mapped["Gallery"] = relationship("Gallery", back_populates="albums")
    parent: Mapped[Optional["Album"]] = relationship(
        "Album", back_populates="children", remote_side=[id]
    )
    children: Mapped[List["Album"]] = relationship(
        "Album", back_populates="parent", passive_deletes="all"
    )
    media_objects: Mapped[List["MediaObject"]] = relationship(
        "MediaObject", back_populates="album", passive_deletes="all"
    )
    metadata_items: Mapped[List["MetadataItem"]] = relationship(
        "MetadataItem", back_populates="album", passive_deletes="all"
    )

    __mapper_args__ = {"version_id_col": version_id}

    @property
    def is_root(self) -> bool:
        """Whether this album is the root of its gallery."""
        return self.parent_id is None

    def __repr__(self) -> str:
        return f"<Album(id={self.id}, parent_id={self.parent_id}, dir='{self.directory_name}')>"


# ----- Media Object -----
class MediaObject(Base):
    """
    A single asset (image, video, audio, external HTML) in an album.

    Carries three file descriptors: thumbnail, optimized and original.

    Attributes:
        id: Primary key
        album_id: Owning album (cascade-deleted with it)
        thumbnail_*, optimized_*, original_*: File name, dimensions, size
        external_html_source: Embed code for external media
        external_type: Mime category of the external media
        seq: Position inside the album
        created_by, date_added, last_modified_by, date_last_modified: Audit
        is_private: Hidden from anonymous users
    """

    __tablename__ = "media_objects"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    album_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("albums.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    thumbnail_filename: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    thumbnail_width: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    thumbnail_height: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    thumbnail_size_kb: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    optimized_filename: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    optimized_width: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    optimized_height: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    optimized_size_kb: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    original_filename: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    original_width: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    original_height: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    original_size_kb: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    external_html_source: Mapped[str] = mapped_column(Text, nullable=False, default="")
    external_type: Mapped[str] = mapped_column(String(15), nullable=False, default="")

    seq: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_by: Mapped[str] = mapped_column(String(256), nullable=False, default="")
    date_added: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    last_modified_by: Mapped[str] = mapped_column(String(256), nullable=False, default="")
    date_last_modified: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    is_private: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    version_id: Mapped[int] = mapped_column(Integer, nullable=False)

    # ---- Relationships ----
    album: Mapped["Album"] = relationship("Album", back_populates="media_objects")
    metadata_items: Mapped[List["MetadataItem"]] = relationship(
        "MetadataItem", back_populates="media_object", passive_deletes="all"
    )

    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        return f"<MediaObject(id={self.id}, album_id={self.album_id}, file='{self.original_filename}')>"
