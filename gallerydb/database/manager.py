#!/usr/bin/env python3
"""
manager.py
--------------------
Database manager for the gallery store.

Provides the GalleryDB class, the entry point callers use to persist the
in-memory album graph. Handles:
    - Initialization of the database engine and sessionmaker
    - Schema creation and migration via Alembic
    - One session per logical operation
    - Reporting failed operations to an event sink

Core Operations:
    - save_album / delete_album
    - save_media_object / delete_media_object
    - save_metadata: a metadata collection or a single item
    - delete_unused_tags: orphan tag sweep
    - get_stats: row counts per table

Notes
==============
- SQLite connections run with foreign keys enforced
- Sessions never autoflush; every write happens in UnitOfWork.save()
- Each operation commits as it goes: a failure partway through a
  multi-step operation leaves earlier saves applied
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Optional, Protocol, TypeVar, Union

# --- Third party ---
from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from alembic import command
from alembic.config import Config

# --- Local imports ---
from gallerydb.core.exceptions import DatabaseError
from gallerydb.core.logging_manager import GalleryLogger, safe_logger
from gallerydb.core.paths import ALEMBIC_DIR, ALEMBIC_INI
from gallerydb.dataclasses import Album, MediaObject, MetadataItem, MetadataItemCollection
from .decorators import handle_db_errors, log_database_operation
from .managers import (
    AlbumManager,
    EventManager,
    MediaObjectManager,
    MetadataManager,
    SaveAction,
    TagManager,
)
from .models import (
    AppEvent,
    Album as AlbumRow,
    Base,
    Gallery,
    MediaObject as MediaObjectRow,
    MetadataItem as MetadataItemRow,
    MetadataTag,
    Tag,
)
from .unit_of_work import MAX_CONFLICT_RETRIES

R = TypeVar("R")


def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    """Turn on foreign key enforcement for every new SQLite connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# ----- Error/event sink -----
class EventSink(Protocol):
    """Receives failures of the persistence entry points."""

    def record_error(self, error: BaseException, context: Dict[str, Any]) -> None:
        ...


class DatabaseEventSink:
    """
    EventSink writing to the app_events table.

    Uses a session of its own, so recording works even when the failed
    operation's session was rolled back.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        logger: Optional[GalleryLogger] = None,
        max_log_items: int = 0,
    ) -> None:
        self.session_factory = session_factory
        self.logger = logger
        self.max_log_items = max_log_items

    def record_error(self, error: BaseException, context: Dict[str, Any]) -> None:
        session = self.session_factory()
        try:
            events = EventManager(session, self.logger)
            events.record_error(error, gallery_id=context.get("gallery_id"), data=context)
            events.validate_log_size(self.max_log_items)
        finally:
            session.close()


# ----- Main Database Manager -----
class GalleryDB:
    """
    Main database manager for the gallery store.

    Attributes:
        db_path: Filesystem path to the SQLite database file
        alembic_dir: Filesystem path to the Alembic migrations directory
        engine: SQLAlchemy engine instance
        SessionLocal: SQLAlchemy session factory
        event_sink: Collaborator told about every failed entry point
        max_conflict_retries: Conflict retries allowed per save

    Usage:
        db = GalleryDB("~/gallery.db", log_dir="~/gallery-logs")
        gallery_id = db.create_gallery("Family")
        root = Album(gallery_id=gallery_id)
        db.save_album(root)
    """

    # ---- Initialization ----
    def __init__(
        self,
        db_path: Union[str, Path],
        alembic_dir: Optional[Union[str, Path]] = None,
        log_dir: Optional[Union[str, Path]] = None,
        event_sink: Optional[EventSink] = None,
        max_conflict_retries: int = MAX_CONFLICT_RETRIES,
    ) -> None:
        """
        Initialize database engine and session factory.

        Args:
            db_path: Path to the SQLite file
            alembic_dir: Path to the Alembic directory (default: bundled)
            log_dir: Directory for log files (optional)
            event_sink: Failure sink (default: the app_events table)
            max_conflict_retries: Conflict retries allowed per save
        """
        self.db_path = Path(db_path).expanduser().resolve()
        self.alembic_dir = Path(alembic_dir or ALEMBIC_DIR).expanduser().resolve()
        self.max_conflict_retries = max_conflict_retries

        # --- Logging ---
        if log_dir:
            self.log_dir = Path(log_dir).expanduser().resolve() / "system"
            self.logger: Optional[GalleryLogger] = GalleryLogger(
                self.log_dir,
                component_name="database",
            )
        else:
            self.logger = None

        self._setup_engine()

        self.event_sink: Optional[EventSink] = (
            event_sink
            if event_sink is not None
            else DatabaseEventSink(self.SessionLocal, self.logger)
        )

    def _setup_engine(self) -> None:
        """Initialize database engine and session factory."""
        log = safe_logger(self.logger)
        try:
            log.log_operation(
                "database_init_start",
                {"db_path": str(self.db_path), "alembic_dir": str(self.alembic_dir)},
            )

            is_new_file = not self.db_path.exists()
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

            self.engine: Engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                pool_pre_ping=True,
            )
            event.listen(self.engine, "connect", _enable_foreign_keys)

            self.SessionLocal: sessionmaker = sessionmaker(
                bind=self.engine,
                autoflush=False,
                expire_on_commit=False,
            )

            self.alembic_cfg: Config = self._setup_alembic()

            if is_new_file:
                self.initialize_schema()

            log.log_operation("database_init_complete", {"success": True})

        except Exception as e:
            log.log_error(e, {"operation": "database_init"})
            raise DatabaseError(f"Database initialization failed: {e}") from e

    def _setup_alembic(self) -> Config:
        """Setup Alembic configuration."""
        alembic_cfg = Config(str(ALEMBIC_INI))
        alembic_cfg.set_main_option("script_location", str(self.alembic_dir))
        alembic_cfg.set_main_option("sqlalchemy.url", f"sqlite:///{self.db_path}")
        return alembic_cfg

    def initialize_schema(self) -> None:
        """
        Create tables if needed and run migrations.

        A database without tables gets every table from the ORM models and
        is stamped at the newest Alembic revision; an existing database is
        upgraded to it.
        """
        log = safe_logger(self.logger)
        try:
            with self.engine.connect() as conn:
                tables = self.engine.dialect.get_table_names(conn)

            if not tables:
                Base.metadata.create_all(bind=self.engine)
                command.stamp(self.alembic_cfg, "head")
                log.log_operation(
                    "fresh_database_created",
                    {"tables_created": len(Base.metadata.tables)},
                )
            else:
                self.upgrade_database()
                log.log_operation("existing_database_migrated", {"table_count": len(tables)})

        except Exception as e:
            raise DatabaseError(f"Could not initialize database: {e}") from e

    @handle_db_errors
    @log_database_operation("upgrade_database")
    def upgrade_database(self, revision: str = "head") -> None:
        """
        Upgrade the database schema to an Alembic revision.

        Args:
            revision: Target revision, 'head' by default
        """
        try:
            command.upgrade(self.alembic_cfg, revision)
        except Exception as e:
            raise DatabaseError(f"Database upgrade failed: {e}") from e

    def close(self) -> None:
        """Release pooled connections and log handlers."""
        self.engine.dispose()
        if self.logger is not None:
            self.logger.close()

    # ---- Session Management ----
    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """
        Provide a session for one logical operation.

        Usage:
            with db.session_scope() as session:
                TagManager(session).delete_unused_tags()
        """
        session = self.SessionLocal()
        session_id = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        log = safe_logger(self.logger)
        log.log_debug("session_start", {"session_id": session_id})

        try:
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            log.log_error(e, {"operation": "session_rollback", "session_id": session_id})
            raise
        finally:
            session.close()
            log.log_debug("session_close", {"session_id": session_id})

    def _run(
        self,
        operation: str,
        gallery_id: Optional[int],
        action: Callable[[Session], R],
    ) -> R:
        """Run one entry point in its own session, reporting failures."""
        try:
            with self.session_scope() as session:
                return action(session)
        except Exception as e:
            self._report(e, {"operation": operation, "gallery_id": gallery_id})
            raise

    def _report(self, error: BaseException, context: Dict[str, Any]) -> None:
        """Hand a failure to the event sink; sink failures are only logged."""
        log = safe_logger(self.logger)
        if self.event_sink is None:
            return
        try:
            self.event_sink.record_error(error, context)
        except Exception as sink_error:
            log.log_error(
                sink_error,
                {"operation": "record_error", "original_error": repr(error)},
            )

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    def create_gallery(self, description: str = "", is_template: bool = False) -> int:
        """
        Create a gallery row.

        Returns:
            The new gallery id
        """

        def action(session: Session) -> int:
            gallery = Gallery(description=description, is_template=is_template)
            session.add(gallery)
            session.flush()
            return gallery.id

        return self._run("create_gallery", None, action)

    def save_album(self, album: Album) -> Album:
        """
        Insert or update an album and its metadata.

        Returns:
            The same album, with its id assigned
        """
        self._run(
            "save_album",
            getattr(album, "gallery_id", None),
            lambda session: self._albums(session).save(album),
        )
        return album

    def delete_album(self, album: Album) -> int:
        """
        Delete an album subtree with its metadata.

        Returns:
            Number of orphaned tags swept
        """
        return self._run(
            "delete_album",
            getattr(album, "gallery_id", None),
            lambda session: self._albums(session).delete(album),
        )

    def save_media_object(self, media_object: MediaObject) -> MediaObject:
        """
        Insert or update a media object and its metadata.

        Returns:
            The same media object, with its id assigned
        """
        self._run(
            "save_media_object",
            getattr(media_object, "gallery_id", None),
            lambda session: self._media_objects(session).save(media_object),
        )
        return media_object

    def delete_media_object(self, media_object: MediaObject) -> int:
        """
        Delete a media object with its metadata.

        Returns:
            Number of orphaned tags swept
        """
        return self._run(
            "delete_media_object",
            getattr(media_object, "gallery_id", None),
            lambda session: self._media_objects(session).delete(media_object),
        )

    def save_metadata(
        self, target: Union[MetadataItemCollection, MetadataItem]
    ) -> Dict[SaveAction, int]:
        """
        Save a metadata collection or a single metadata item.

        Returns:
            Count of items per SaveAction
        """

        def action(session: Session) -> Dict[SaveAction, int]:
            manager = MetadataManager(session, self.logger, self.max_conflict_retries)
            if isinstance(target, MetadataItem):
                return manager.save_item(target)
            return manager.save_collection(target)

        return self._run("save_metadata", None, action)

    def delete_unused_tags(self) -> int:
        """Delete every unreferenced tag; returns how many were deleted."""
        return self._run(
            "delete_unused_tags",
            None,
            lambda session: TagManager(
                session, self.logger, self.max_conflict_retries
            ).delete_unused_tags(),
        )

    def get_stats(self) -> Dict[str, int]:
        """Row counts per table."""
        models = {
            "galleries": Gallery,
            "albums": AlbumRow,
            "media_objects": MediaObjectRow,
            "metadata_items": MetadataItemRow,
            "tags": Tag,
            "metadata_tags": MetadataTag,
            "app_events": AppEvent,
        }
        with self.session_scope() as session:
            return {name: session.query(model).count() for name, model in models.items()}

    # ---- Manager factories ----
    def _albums(self, session: Session) -> AlbumManager:
        return AlbumManager(session, self.logger, self.max_conflict_retries)

    def _media_objects(self, session: Session) -> MediaObjectManager:
        return MediaObjectManager(session, self.logger, self.max_conflict_retries)
