"""
test_manager.py
---------------
Tests for the GalleryDB entry points, schema setup and failure reporting.
"""
import json

import pytest
from sqlalchemy import inspect as sa_inspect
from unittest.mock import MagicMock

from gallerydb.core.exceptions import DatabaseError, ValidationError
from gallerydb.dataclasses import Album, FileDescriptor, MediaObject
from gallerydb.database.manager import DatabaseEventSink, GalleryDB
from gallerydb.database.managers import SaveAction, TagManager
from gallerydb.database.models import AppEvent, Base, MetadataItemName


@pytest.fixture
def gallery(test_db):
    """A saved gallery with a root album."""
    gallery_id = test_db.create_gallery("Family")
    root = test_db.save_album(Album(gallery_id=gallery_id))
    return gallery_id, root


class TestGalleryDBSetup:
    """Engine, schema and logging setup."""

    def test_fresh_file_gets_schema_and_stamp(self, tmp_path):
        db = GalleryDB(tmp_path / "fresh.db")
        try:
            tables = set(sa_inspect(db.engine).get_table_names())
            assert set(Base.metadata.tables) <= tables
            assert "alembic_version" in tables
            assert all(count == 0 for count in db.get_stats().values())
        finally:
            db.close()

    def test_initialize_schema_twice(self, tmp_path):
        db = GalleryDB(tmp_path / "fresh.db")
        try:
            db.initialize_schema()
        finally:
            db.close()

    def test_migration_builds_same_tables(self, tmp_path):
        """Running the migrations on an empty file creates every model table."""
        db_path = tmp_path / "empty.db"
        db_path.touch()
        db = GalleryDB(db_path)
        try:
            db.upgrade_database()
            tables = set(sa_inspect(db.engine).get_table_names())
            assert set(Base.metadata.tables) <= tables
        finally:
            db.close()

    def test_foreign_keys_enforced(self, test_db):
        with test_db.engine.connect() as conn:
            assert conn.exec_driver_sql("PRAGMA foreign_keys").scalar() == 1

    def test_log_dir_creates_system_logs(self, tmp_path):
        db = GalleryDB(tmp_path / "logged.db", log_dir=tmp_path / "logs")
        try:
            assert (tmp_path / "logs" / "system" / "database.log").exists()
        finally:
            db.close()

    def test_bad_path_raises_database_error(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        with pytest.raises(DatabaseError, match="initialization failed"):
            GalleryDB(blocker / "gallery.db")


class TestGalleryDBEntryPoints:
    """End-to-end use of the facade."""

    def test_save_album_assigns_id(self, test_db, gallery):
        gallery_id, root = gallery
        assert not root.is_new
        assert test_db.get_stats()["albums"] == 1

    def test_full_lifecycle(self, test_db, gallery):
        gallery_id, root = gallery

        trip = Album(gallery_id=gallery_id, directory_name="trip")
        root.add_child(trip)
        test_db.save_album(trip)

        photo = MediaObject(gallery_id=gallery_id, original=FileDescriptor("sea.jpg"))
        trip.add_child(photo)
        photo.add_metadata(MetadataItemName.TAGS, "Beach, Vacation")
        test_db.save_media_object(photo)

        stats = test_db.get_stats()
        assert stats["media_objects"] == 1
        assert stats["metadata_items"] == 1
        assert stats["tags"] == 2
        assert stats["metadata_tags"] == 2

        caption = photo.add_metadata(MetadataItemName.CAPTION, "Calm sea")
        assert test_db.save_metadata(caption)[SaveAction.INSERTED] == 1

        photo.metadata_items.find(MetadataItemName.TAGS).value = "Beach"
        summary = test_db.save_metadata(photo.metadata_items)
        assert summary[SaveAction.UPDATED] == 1
        assert test_db.get_stats()["tags"] == 1

        assert test_db.delete_album(trip) == 1
        stats = test_db.get_stats()
        assert stats["albums"] == 1
        assert stats["media_objects"] == 0
        assert stats["metadata_items"] == 0
        assert stats["tags"] == 0

    def test_delete_media_object(self, test_db, gallery):
        gallery_id, root = gallery
        photo = MediaObject(gallery_id=gallery_id)
        root.add_child(photo)
        photo.add_metadata(MetadataItemName.PEOPLE, "Alice")
        test_db.save_media_object(photo)

        assert test_db.delete_media_object(photo) == 1
        assert test_db.get_stats()["media_objects"] == 0

    def test_delete_unused_tags(self, test_db):
        with test_db.session_scope() as session:
            TagManager(session).ensure_tags_exist(["Orphan"])

        assert test_db.delete_unused_tags() == 1
        assert test_db.delete_unused_tags() == 0


class TestFailureReporting:
    """Failed entry points are handed to the event sink."""

    def test_default_sink_records_app_event(self, test_db, gallery):
        gallery_id, _ = gallery
        orphan = MediaObject(gallery_id=gallery_id)

        with pytest.raises(ValidationError):
            test_db.save_media_object(orphan)

        with test_db.session_scope() as session:
            (event,) = session.query(AppEvent).all()
            assert event.ex_type == "ValidationError"
            assert event.gallery_id == gallery_id
            assert json.loads(event.data)["operation"] == "save_media_object"

    def test_custom_sink(self, test_db_path, gallery):
        sink = MagicMock()
        db = GalleryDB(test_db_path, event_sink=sink)
        try:
            with pytest.raises(ValidationError):
                db.delete_album(Album(gallery_id=1))
        finally:
            db.close()

        error, context = sink.record_error.call_args[0]
        assert isinstance(error, ValidationError)
        assert context == {"operation": "delete_album", "gallery_id": 1}

    def test_failing_sink_does_not_mask_error(self, test_db_path, gallery):
        sink = MagicMock()
        sink.record_error.side_effect = RuntimeError("sink down")
        db = GalleryDB(test_db_path, event_sink=sink)
        try:
            with pytest.raises(ValidationError):
                db.save_album(None)
        finally:
            db.close()

    def test_event_log_trimmed(self, test_db):
        sink = DatabaseEventSink(test_db.SessionLocal, max_log_items=2)
        for n in range(4):
            sink.record_error(RuntimeError(f"failure {n}"), {"operation": "test"})

        with test_db.session_scope() as session:
            messages = [e.message for e in session.query(AppEvent).order_by(AppEvent.id)]
        assert messages == ["failure 2", "failure 3"]
