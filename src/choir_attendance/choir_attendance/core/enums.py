from __future__ import annotations

from enum import Enum
from typing import Optional


class Role(str, Enum):
    """Roles used for authorization."""

    ADMIN = "admin"
    MEMBER = "member"


class Category(str, Enum):
    """Event types an attendance sheet can be recorded for."""

    DAILY_MASS = "Daily mass"
    SATURDAY_PRACTICE = "Saturday practice"
    SUNDAY_MORNING_MASS = "Sunday morning mass"
    SUNDAY_EVENING_MASS = "Sunday evening mass"
    SPECIAL_MASS_PRACTICE = "Special mass practice"
    SPECIAL_MASS = "Special mass"
    MARRIAGE_MASS = "Marriage mass"
    CHOIR_MEETING = "Choir meeting"
    CLEANING = "Cleaning"
    OTHERS = "Others"

    @classmethod
    def coerce(cls, value) -> Optional["Category"]:
        """Return the matching member, or None for anything unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


class AttendanceMark(str, Enum):
    """Per-member outcome stored for one event."""

    PRESENT = "Present"
    ABSENT = "Absent"
    EXCUSED = "Excused"
    EXCUSED_BUT_PRESENT = "Excused but Present"

    @classmethod
    def coerce(cls, value) -> Optional["AttendanceMark"]:
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def needs_reason(self) -> bool:
        return self in (AttendanceMark.EXCUSED, AttendanceMark.EXCUSED_BUT_PRESENT)


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"

    @classmethod
    def coerce(cls, value) -> "Gender":
        # Legacy rows may carry lower-case or empty values.
        for g in cls:
            if str(value or "").strip().lower() == g.value.lower():
                return g
        return cls.OTHER


class MaritalStatus(str, Enum):
    SINGLE = "Single"
    MARRIED = "Married"


class TeamType(str, Enum):
    """Rotation a team serves in."""

    SUNDAY = "sunday"
    MARRIAGE = "marriage"


class AnomalyKind(str, Enum):
    """Soft data problems found while scoring historical records."""

    MISSING_REFERENCE = "MISSING_REFERENCE"
    UNKNOWN_STATUS = "UNKNOWN_STATUS"
    MISSING_REASON = "MISSING_REASON"
    UNKNOWN_CATEGORY = "UNKNOWN_CATEGORY"
