"""
Metadata Models
---------------

Descriptive metadata and the normalized tag index.

Models:
    - MetadataItem: One named value (caption, tags, people, ...) owned by
      exactly one album or one media object
    - Tag: Globally unique tag token, keyed by its text
    - MetadataTag: Junction linking a Tags/People metadata item to the tags
      parsed out of its value

None of the foreign keys in this module cascade. Metadata rows are deleted
explicitly before their owning album or media object, and junction rows are
deleted explicitly before their metadata item. A tag lives only as long as
some junction row references it; unreferenced tags are swept by the tag
manager.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import TYPE_CHECKING, List, Optional

# --- Third party imports ---
from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, Text
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

# --- Local imports ---
from .base import Base
from .enums import MetadataItemName

if TYPE_CHECKING:
    from .gallery import Album, MediaObject


class MetadataItem(Base):
    """
    A named metadata value attached to an album or a media object.

    Attributes:
        id: Primary key
        name: Kind of metadata (see MetadataItemName)
        value: Display value; for Tags/People a comma-separated token list
        raw_value: Unformatted value as extracted from the file
        album_id: Owning album, or None
        media_object_id: Owning media object, or None

    Exactly one of ``album_id`` and ``media_object_id`` is set.
    """

    __tablename__ = "metadata_items"
    __table_args__ = (
        CheckConstraint(
            "(album_id IS NULL) <> (media_object_id IS NULL)",
            name="ck_metadata_single_owner",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[MetadataItemName] = mapped_column(
        SQLEnum(MetadataItemName, native_enum=False, length=40),
        nullable=False,
        index=True,
    )
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")
    raw_value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    album_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("albums.id"), nullable=True, index=True
    )
    media_object_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("media_objects.id"), nullable=True, index=True
    )
    version_id: Mapped[int] = mapped_column(Integer, nullable=False)

    # ---- Relationships ----
    album: Mapped[Optional["Album"]] = relationship(
        "Album", back_populates="metadata_items"
    )
    media_object: Mapped[Optional["MediaObject"]] = relationship(
        "MediaObject", back_populates="metadata_items"
    )
    metadata_tags: Mapped[List["MetadataTag"]] = relationship(
        "MetadataTag", back_populates="metadata_item", passive_deletes="all"
    )

    __mapper_args__ = {"version_id_col": version_id}

    @property
    def is_tag_like(self) -> bool:
        """Whether this item's value feeds the tag index."""
        return MetadataItemName(self.name).is_tag_like()

    def __repr__(self) -> str:
        return f"<MetadataItem(id={self.id}, name={self.name!s}, value='{self.value}')>"


class Tag(Base):
    """
    A tag token shared by every gallery.

    The primary key is the tag text itself, compared exactly (case and
    accents matter) when the store checks for an existing tag.

    Attributes:
        name: Tag text (primary key, max 100 characters)
    """

    __tablename__ = "tags"
    __table_args__ = (
        CheckConstraint("length(trim(name)) > 0", name="ck_tag_non_empty"),
    )

    name: Mapped[str] = mapped_column(String(100), primary_key=True)
    version_id: Mapped[int] = mapped_column(Integer, nullable=False)

    metadata_tags: Mapped[List["MetadataTag"]] = relationship(
        "MetadataTag", back_populates="tag", passive_deletes="all"
    )

    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        return f"<Tag(name='{self.name}')>"

    def __str__(self) -> str:
        return self.name


class MetadataTag(Base):
    """
    Junction row linking a metadata item to one of its tags.

    Attributes:
        metadata_id: Metadata item (part of the composite key)
        tag_name: Tag text (part of the composite key)
        gallery_id: Gallery the metadata item belongs to, used to scope
            tag counts per gallery
    """

    __tablename__ = "metadata_tags"

    metadata_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("metadata_items.id"), primary_key=True
    )
    tag_name: Mapped[str] = mapped_column(
        String(100), ForeignKey("tags.name"), primary_key=True
    )
    gallery_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("galleries.id"), nullable=False, index=True
    )
    version_id: Mapped[int] = mapped_column(Integer, nullable=False)

    # ---- Relationships ----
    metadata_item: Mapped["MetadataItem"] = relationship(
        "MetadataItem", back_populates="metadata_tags"
    )
    tag: Mapped["Tag"] = relationship("Tag", back_populates="metadata_tags")

    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        return f"<MetadataTag(metadata_id={self.metadata_id}, tag='{self.tag_name}')>"
