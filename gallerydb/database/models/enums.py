"""
Enumeration Types
------------------

Enum classes for the gallery database models.

Enums:
    - MetadataItemName: Name of a metadata item (Tags, People, Caption, ...)
    - EventType: Severity of an entry in the application event log

MetadataItemName keeps the numeric identifiers used by existing galleries so
values exchanged with other tools stay stable.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from enum import Enum, IntEnum
from typing import List


class MetadataItemName(IntEnum):
    """
    Enumeration of metadata item names.

    Only TAGS and PEOPLE are "tag-like": their comma-separated values are
    normalized into the tag index.
    """

    NOT_SPECIFIED = -2147483648
    AUDIO_BIT_RATE = 0
    AUDIO_FORMAT = 1
    AUTHOR = 2
    BIT_RATE = 3
    CAMERA_MODEL = 4
    COMMENT = 5
    COLOR_REPRESENTATION = 6
    COPYRIGHT = 7
    DATE_PICTURE_TAKEN = 8
    DESCRIPTION = 9
    DIMENSIONS = 10
    DURATION = 11
    EQUIPMENT_MANUFACTURER = 12
    EXPOSURE_COMPENSATION = 13
    EXPOSURE_PROGRAM = 14
    EXPOSURE_TIME = 15
    FLASH_MODE = 16
    F_NUMBER = 17
    FOCAL_LENGTH = 18
    HEIGHT = 19
    HORIZONTAL_RESOLUTION = 20
    ISO_SPEED = 21
    TAGS = 22
    LENS_APERTURE = 23
    LIGHT_SOURCE = 24
    METERING_MODE = 25
    RATING = 26
    SUBJECT_DISTANCE = 27
    SUBJECT = 28
    TITLE = 29
    VERTICAL_RESOLUTION = 30
    VIDEO_BIT_RATE = 31
    VIDEO_FORMAT = 32
    WIDTH = 33
    FILE_NAME = 34
    FILE_NAME_WITHOUT_EXTENSION = 35
    FILE_SIZE_KB = 36
    DATE_FILE_CREATED = 37
    DATE_FILE_CREATED_UTC = 38
    DATE_FILE_LAST_MODIFIED = 39
    DATE_FILE_LAST_MODIFIED_UTC = 40
    CAPTION = 41
    PEOPLE = 42
    ORIENTATION = 43
    GPS_LOCATION = 101
    GPS_LATITUDE = 103
    GPS_LONGITUDE = 104
    GPS_ALTITUDE = 109
    DATE_ADDED = 111
    HTML_SOURCE = 112
    RATING_COUNT = 113

    def is_tag_like(self) -> bool:
        """Whether values of this item feed the tag index."""
        return self in (MetadataItemName.TAGS, MetadataItemName.PEOPLE)

    @classmethod
    def tag_like(cls) -> List["MetadataItemName"]:
        """Get the metadata names whose values are tag tokens."""
        return [cls.TAGS, cls.PEOPLE]


class EventType(str, Enum):
    """
    Enumeration of event log severities.
    - INFO: Informational message
    - WARNING: Something unexpected that did not stop the operation
    - ERROR: A failed operation
    """

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
