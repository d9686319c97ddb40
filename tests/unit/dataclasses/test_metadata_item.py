"""
test_metadata_item.py
---------------------
Unit tests for the in-memory metadata item and its collection.
"""
from gallerydb.dataclasses import MetadataItem, MetadataItemCollection
from gallerydb.dataclasses.metadata_item import UNASSIGNED_ID
from gallerydb.database.models import MetadataItemName


class TestMetadataItemDirtyTracking:
    """Changes to tracked fields mark the item dirty."""

    def test_new_item_is_dirty(self):
        item = MetadataItem(MetadataItemName.CAPTION, "hello")
        assert item.is_new
        assert item.metadata_id == UNASSIGNED_ID
        assert item.has_changes

    def test_mark_saved_clears_flag(self):
        item = MetadataItem(MetadataItemName.CAPTION, "hello")
        item.mark_saved()
        assert item.has_changes is False

    def test_value_change_marks_dirty(self):
        item = MetadataItem(MetadataItemName.CAPTION, "hello")
        item.mark_saved()
        item.value = "bye"
        assert item.has_changes

    def test_same_value_stays_clean(self):
        item = MetadataItem(MetadataItemName.CAPTION, "hello")
        item.mark_saved()
        item.value = "hello"
        assert item.has_changes is False

    def test_other_tracked_fields(self):
        for field_name, value in [
            ("name", MetadataItemName.TITLE),
            ("raw_value", "raw"),
            ("is_deleted", True),
        ]:
            item = MetadataItem(MetadataItemName.CAPTION, "hello")
            item.mark_saved()
            setattr(item, field_name, value)
            assert item.has_changes, field_name

    def test_id_assignment_does_not_mark_dirty(self):
        item = MetadataItem(MetadataItemName.CAPTION, "hello")
        item.mark_saved()
        item.metadata_id = 12
        assert item.has_changes is False
        assert not item.is_new

    def test_tag_like(self):
        assert MetadataItem(MetadataItemName.TAGS).is_tag_like
        assert MetadataItem(MetadataItemName.PEOPLE).is_tag_like
        assert not MetadataItem(MetadataItemName.CAPTION).is_tag_like


class TestMetadataItemCollection:
    """Identity-based collection behavior."""

    def test_equal_items_are_distinct(self):
        first = MetadataItem(MetadataItemName.TAGS, "Beach")
        second = MetadataItem(MetadataItemName.TAGS, "Beach")
        collection = MetadataItemCollection([first])
        collection.add(second)

        assert len(collection) == 2
        assert second in collection

    def test_add_same_item_twice(self):
        item = MetadataItem(MetadataItemName.TAGS, "Beach")
        collection = MetadataItemCollection()
        collection.add(item)
        collection.add(item)
        assert len(collection) == 1

    def test_remove(self):
        item = MetadataItem(MetadataItemName.TAGS, "Beach")
        collection = MetadataItemCollection([item])
        collection.remove(item)
        collection.remove(item)
        assert item not in collection

    def test_find_skips_deleted(self):
        deleted = MetadataItem(MetadataItemName.TITLE, "old", is_deleted=True)
        live = MetadataItem(MetadataItemName.TITLE, "new")
        collection = MetadataItemCollection([deleted, live])

        assert collection.find(MetadataItemName.TITLE) is live
        assert collection.find(MetadataItemName.CAPTION) is None

    def test_items_to_save(self):
        clean = MetadataItem(MetadataItemName.TITLE, "kept")
        clean.mark_saved()
        dirty = MetadataItem(MetadataItemName.CAPTION, "changed")
        doomed = MetadataItem(MetadataItemName.TAGS, "x", metadata_id=4)
        doomed.mark_saved()
        doomed.is_deleted = True

        collection = MetadataItemCollection([clean, dirty, doomed])
        assert collection.get_items_to_save() == [dirty, doomed]

    def test_iteration_allows_removal(self):
        items = [MetadataItem(MetadataItemName.TAGS, str(n)) for n in range(3)]
        collection = MetadataItemCollection(items)
        for item in collection:
            collection.remove(item)
        assert len(collection) == 0
