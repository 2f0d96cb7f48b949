from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ...attendance.model import AttendanceEvent
from ..model import ScoreResult, ScoreWindow


class ScoreCalculator(ABC):
    """Calculator interface (Strategy Pattern for attendance credit)."""

    @abstractmethod
    def score_member(
        self,
        *,
        member_id: str,
        window: ScoreWindow,
        events: Sequence[AttendanceEvent],
    ) -> ScoreResult:
        raise NotImplementedError
