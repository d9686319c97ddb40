"""
Event Log Model
---------------

Persistent application event log.

Models:
    - AppEvent: An informational message, warning or recorded error

Errors reported by the persistence entry points end up here through the
database event sink, together with the exception type, message, traceback
and a JSON-serialized context dictionary.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import datetime
from typing import Optional

# --- Third party imports ---
from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

# --- Local imports ---
from .base import Base, utc_now
from .enums import EventType


class AppEvent(Base):
    """
    One entry of the application event log.

    Attributes:
        id: Primary key
        gallery_id: Gallery the event relates to, None for system events
        event_type: Severity (info, warning, error)
        message: Human-readable message
        ex_type: Exception class name for recorded errors
        ex_source: Module the exception was raised from
        ex_stack_trace: Formatted traceback
        data: JSON-serialized context dictionary
        timestamp: When the event was recorded
    """

    __tablename__ = "app_events"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    gallery_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    event_type: Mapped[EventType] = mapped_column(
        SQLEnum(EventType, native_enum=False, length=10),
        nullable=False,
        default=EventType.INFO,
    )
    message: Mapped[str] = mapped_column(Text, nullable=False, default="")
    ex_type: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    ex_source: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    ex_stack_trace: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    data: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now, index=True
    )
    version_id: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version_id}

    @property
    def is_error(self) -> bool:
        """Whether this event records a failure."""
        return self.event_type == EventType.ERROR

    def __repr__(self) -> str:
        return f"<AppEvent(id={self.id}, type={self.event_type}, message='{self.message[:40]}')>"
