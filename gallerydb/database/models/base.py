"""
Base Classes
------------

Foundational ORM classes for the gallery database.

Classes:
    - Base: Declarative base for all SQLAlchemy models

Every mapped table declares an integer ``version_id`` column registered as
the mapper's ``version_id_col``. SQLAlchemy then adds the version to the
WHERE clause of each UPDATE and DELETE and raises ``StaleDataError`` when
the row was changed or removed by someone else in the meantime.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import datetime, timezone

# --- Third party ---
from sqlalchemy.orm import DeclarativeBase


# --- Base ORM class ---
class Base(DeclarativeBase):
    """
    Base class for all ORM models.

    Serves as the declarative base for SQLAlchemy models and provides
    access to the metadata object for table creation and migrations.
    """

    pass


def utc_now() -> datetime:
    """Timezone-aware timestamp used as the default for audit columns."""
    return datetime.now(timezone.utc)
