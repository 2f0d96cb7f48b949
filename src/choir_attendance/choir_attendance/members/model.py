from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import Gender, MaritalStatus


@dataclass(frozen=True)
class Member:
    """Domain entity: a choir member.

    Note: plain data object (no database access code).
    """

    member_id: str
    name: str
    gender: Gender
    dob: Optional[date] = None
    marital_status: Optional[MaritalStatus] = None
    wedding_date: Optional[date] = None
    is_organist: bool = False
    is_sound_engineer: bool = False
    is_presentation_specialist: bool = False
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    anbiyam: Optional[str] = None

    @property
    def is_married(self) -> bool:
        return self.marital_status == MaritalStatus.MARRIED


@dataclass(frozen=True)
class Celebration:
    """Read-model for the dashboard's upcoming birthdays/anniversaries."""

    member_id: str
    name: str
    on: date
    years: int
