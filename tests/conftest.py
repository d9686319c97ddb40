"""
conftest.py
-----------
Shared pytest fixtures for gallerydb tests.

Provides fixtures for:
- Database setup and teardown
- Manager instances bound to one session
- A small saved album tree to work on
"""
import pytest
from pathlib import Path
from tempfile import TemporaryDirectory


# ----- Path Fixtures -----

@pytest.fixture
def tmp_dir():
    """Create a temporary directory for test file operations."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_db_path(tmp_dir):
    """Create temporary test database path."""
    return tmp_dir / "test.db"


# ----- Database Fixtures -----

@pytest.fixture
def test_db(test_db_path):
    """
    Create test database instance with schema.

    Returns a GalleryDB instance over a file database whose tables were
    created from the ORM models. Database is torn down after the test.
    """
    from gallerydb.database.manager import GalleryDB
    from gallerydb.database.models import Base
    from sqlalchemy import create_engine

    # Create engine and initialize schema
    engine = create_engine(f"sqlite:///{test_db_path}")
    Base.metadata.create_all(engine)
    engine.dispose()

    db = GalleryDB(db_path=test_db_path)

    yield db

    # Cleanup
    db.close()
    if test_db_path.exists():
        test_db_path.unlink()


@pytest.fixture
def db_session(test_db):
    """Create a database session for tests."""
    with test_db.session_scope() as session:
        yield session


@pytest.fixture
def other_session(test_db):
    """A second, independent session on the same database."""
    session = test_db.SessionLocal()
    yield session
    session.close()


@pytest.fixture
def gallery_id(test_db):
    """Id of a saved gallery."""
    return test_db.create_gallery("Test gallery")


# ----- Manager Fixtures -----

@pytest.fixture
def tag_manager(db_session):
    """Create TagManager instance for testing."""
    from gallerydb.database.managers import TagManager
    return TagManager(db_session)


@pytest.fixture
def metadata_tag_manager(db_session):
    """Create MetadataTagManager instance for testing."""
    from gallerydb.database.managers import MetadataTagManager
    return MetadataTagManager(db_session)


@pytest.fixture
def metadata_manager(db_session):
    """Create MetadataManager instance for testing."""
    from gallerydb.database.managers import MetadataManager
    return MetadataManager(db_session)


@pytest.fixture
def album_manager(db_session):
    """Create AlbumManager instance for testing."""
    from gallerydb.database.managers import AlbumManager
    return AlbumManager(db_session)


@pytest.fixture
def media_object_manager(db_session):
    """Create MediaObjectManager instance for testing."""
    from gallerydb.database.managers import MediaObjectManager
    return MediaObjectManager(db_session)


@pytest.fixture
def event_manager(db_session):
    """Create EventManager instance for testing."""
    from gallerydb.database.managers import EventManager
    return EventManager(db_session)


# ----- Gallery Object Fixtures -----

@pytest.fixture
def root_album(album_manager, gallery_id):
    """A saved root album."""
    from gallerydb.dataclasses import Album
    album = Album(gallery_id=gallery_id, directory_name="")
    album_manager.save(album)
    return album


@pytest.fixture
def saved_photo(media_object_manager, root_album):
    """A saved media object inside the root album."""
    from gallerydb.dataclasses import FileDescriptor, MediaObject
    photo = MediaObject(
        gallery_id=root_album.gallery_id,
        original=FileDescriptor("beach.jpg", 4000, 3000, 2048),
    )
    root_album.add_child(photo)
    media_object_manager.save(photo)
    return photo

