from __future__ import annotations

from datetime import date, datetime

import pytest

from src.choir_attendance.choir_attendance.core.enums import Gender, MaritalStatus
from src.choir_attendance.choir_attendance.members.model import Member


@pytest.fixture
def fixed_now() -> datetime:
    # Saturday evening, after the reminder hour.
    return datetime(2025, 1, 11, 22, 0, 0)


@pytest.fixture
def members() -> list[Member]:
    return [
        Member(member_id="alice", name="Alice", gender=Gender.FEMALE, dob=date(1995, 1, 20)),
        Member(
            member_id="bob",
            name="Bob",
            gender=Gender.MALE,
            marital_status=MaritalStatus.MARRIED,
            wedding_date=date(2015, 2, 1),
        ),
        Member(member_id="carol", name="Carol", gender=Gender.FEMALE, is_organist=True),
    ]
