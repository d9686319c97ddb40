#!/usr/bin/env python3
"""
event_manager.py
--------------------
Manages the application event log.

Events are informational messages, warnings and recorded errors. Recorded
errors keep the exception type, source module, traceback and a
JSON-serialized context dictionary so failures of the persistence entry
points can be inspected later.

Key Features:
    - Record messages and exceptions
    - List events, optionally per gallery
    - Delete one event or clear the log
    - Trim the log to a maximum number of entries

Usage:
    event_mgr = EventManager(session, logger)
    event_mgr.record_error(exc, gallery_id=1, data={"operation": "save_album"})
    event_mgr.validate_log_size(max_items=1000)
"""
import json
import traceback
from typing import Any, Dict, List, Optional

from gallerydb.core.exceptions import ValidationError
from gallerydb.core.validators import DataValidator
from gallerydb.database.decorators import handle_db_errors, log_database_operation
from gallerydb.database.models import AppEvent, EventType
from .base_manager import BaseManager


class EventManager(BaseManager):
    """Manages AppEvent table operations."""

    # -------------------------------------------------------------------------
    # Recording
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("record_event")
    def record_event(
        self,
        message: str,
        event_type: EventType = EventType.INFO,
        gallery_id: Optional[int] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> AppEvent:
        """
        Record an event.

        Args:
            message: Human-readable message
            event_type: Severity of the event
            gallery_id: Related gallery, None for system events
            data: Optional context, stored as JSON

        Returns:
            The saved event

        Raises:
            ValidationError: If message is empty
        """
        normalized = DataValidator.normalize_string(message)
        if not normalized:
            raise ValidationError("Event message cannot be empty")

        event = self.uow.add(
            AppEvent(
                gallery_id=gallery_id,
                event_type=EventType(event_type),
                message=normalized,
                data=self._serialize(data),
            )
        )
        self.uow.save()
        return event

    @handle_db_errors
    @log_database_operation("record_error")
    def record_error(
        self,
        error: BaseException,
        gallery_id: Optional[int] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> AppEvent:
        """
        Record an exception as an error event.

        Args:
            error: Exception to record
            gallery_id: Related gallery, None for system events
            data: Optional context, stored as JSON

        Returns:
            The saved event
        """
        DataValidator.require(error, "error")

        stack = "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        )
        event = self.uow.add(
            AppEvent(
                gallery_id=gallery_id,
                event_type=EventType.ERROR,
                message=str(error) or type(error).__name__,
                ex_type=type(error).__name__,
                ex_source=type(error).__module__,
                ex_stack_trace=stack,
                data=self._serialize(data),
            )
        )
        self.uow.save()
        return event

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("get_events")
    def get_all(self, gallery_id: Optional[int] = None) -> List[AppEvent]:
        """
        Retrieve events, newest first.

        Args:
            gallery_id: Only events of this gallery when given

        Returns:
            List of events
        """
        query = self.session.query(AppEvent)
        if gallery_id is not None:
            query = query.filter(AppEvent.gallery_id == gallery_id)
        return query.order_by(AppEvent.timestamp.desc(), AppEvent.id.desc()).all()

    @handle_db_errors
    @log_database_operation("get_event")
    def get(self, event_id: int) -> Optional[AppEvent]:
        """Retrieve one event by id."""
        return self._get_by_id(AppEvent, event_id)

    # -------------------------------------------------------------------------
    # Removal
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("delete_event")
    def delete(self, event_id: int) -> None:
        """
        Delete one event.

        Raises:
            NotFoundError: If no event has that id
        """
        self.uow.delete(self._require(AppEvent, event_id))
        self.uow.save()

    @handle_db_errors
    @log_database_operation("clear_event_log")
    def clear_event_log(self, gallery_id: Optional[int] = None) -> int:
        """
        Delete every event, or every event of one gallery.

        Returns:
            Number of events deleted
        """
        events = self.get_all(gallery_id)
        for event in events:
            self.uow.delete(event)
        if events:
            self.uow.save()
        return len(events)

    @handle_db_errors
    @log_database_operation("validate_log_size")
    def validate_log_size(self, max_items: int) -> int:
        """
        Trim the log to its newest ``max_items`` entries.

        Args:
            max_items: Entries to keep; zero or less keeps everything

        Returns:
            Number of events deleted
        """
        if max_items <= 0:
            return 0

        surplus = self.get_all()[max_items:]
        for event in surplus:
            self.uow.delete(event)
        if surplus:
            self.uow.save()
        return len(surplus)

    @staticmethod
    def _serialize(data: Optional[Dict[str, Any]]) -> Optional[str]:
        if not data:
            return None
        return json.dumps(data, default=str, sort_keys=True)
