#!/usr/bin/env python3
"""
metadata_item.py
----------------
In-memory metadata items and the per-object collection that holds them.

A MetadataItem tracks whether it changed since it was last persisted.
Assigning a different ``name``, ``value``, ``raw_value`` or ``is_deleted``
marks the item dirty; the metadata manager clears the flag after a save.
Items start out dirty unless they are built from a stored row.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, List, Optional

from gallerydb.database.models.enums import MetadataItemName

if TYPE_CHECKING:
    from gallerydb.dataclasses.gallery_object import GalleryObject


# Id carried by objects that have not been persisted yet
UNASSIGNED_ID = -2147483648

_TRACKED_FIELDS = frozenset({"name", "value", "raw_value", "is_deleted"})


@dataclass(eq=False)
class MetadataItem:
    """
    A named metadata value belonging to an album or media object.

    Attributes:
        name: Kind of metadata
        value: Display value (comma-separated tokens for Tags/People)
        raw_value: Unformatted value, if any
        metadata_id: Row id, UNASSIGNED_ID until first saved
        gallery_object: Owning album or media object
        is_deleted: Marked for deletion on the next save
        has_changes: Dirty flag
    """

    name: MetadataItemName
    value: str = ""
    raw_value: Optional[str] = None
    metadata_id: int = UNASSIGNED_ID
    gallery_object: Optional["GalleryObject"] = field(default=None, repr=False)
    is_deleted: bool = False
    has_changes: bool = True

    def __setattr__(self, key, value) -> None:
        if key in _TRACKED_FIELDS and key in self.__dict__:
            if self.__dict__[key] != value:
                object.__setattr__(self, "has_changes", True)
        object.__setattr__(self, key, value)

    @property
    def is_new(self) -> bool:
        """Whether the item has never been saved."""
        return self.metadata_id == UNASSIGNED_ID

    @property
    def is_tag_like(self) -> bool:
        """Whether the value of this item feeds the tag index."""
        return MetadataItemName(self.name).is_tag_like()

    def mark_saved(self) -> None:
        """Clear the dirty flag after a successful save."""
        object.__setattr__(self, "has_changes", False)


class MetadataItemCollection:
    """
    Ordered set of metadata items owned by one gallery object.

    Items are compared by identity, so two items with the same name and
    value are still distinct entries.
    """

    def __init__(self, items: Optional[List[MetadataItem]] = None) -> None:
        self._items: List[MetadataItem] = list(items or [])

    def __iter__(self) -> Iterator[MetadataItem]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item: object) -> bool:
        return any(existing is item for existing in self._items)

    def add(self, item: MetadataItem) -> None:
        """Append an item unless this exact item is already present."""
        if item not in self:
            self._items.append(item)

    def remove(self, item: MetadataItem) -> None:
        """Remove an item; missing items are ignored."""
        self._items = [existing for existing in self._items if existing is not item]

    def find(self, name: MetadataItemName) -> Optional[MetadataItem]:
        """Get the first non-deleted item with the given name."""
        for item in self._items:
            if item.name == name and not item.is_deleted:
                return item
        return None

    def get_items_to_save(self) -> List[MetadataItem]:
        """
        Get the items that need to be persisted.

        Returns:
            Items that are dirty or marked for deletion, in collection order
        """
        return [item for item in self._items if item.has_changes or item.is_deleted]
