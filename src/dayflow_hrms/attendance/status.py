from __future__ import annotations

from abc import ABC, abstractmethod

from ..core.constants import FULL_DAY_MINUTES, HALF_DAY_MINUTES
from ..core.enums import AttendanceStatus


class StatusPolicy(ABC):
    """Strategy deciding a day's status from worked minutes."""

    @abstractmethod
    def derive(self, work_minutes: int, current: AttendanceStatus) -> AttendanceStatus:
        raise NotImplementedError


class ThresholdStatusPolicy(StatusPolicy):
    """>= full_day -> present, >= half_day -> half-day, otherwise keep the current status."""

    def __init__(self, *, full_day_minutes: int = FULL_DAY_MINUTES, half_day_minutes: int = HALF_DAY_MINUTES):
        self.full_day_minutes = int(full_day_minutes)
        self.half_day_minutes = int(half_day_minutes)

    def derive(self, work_minutes: int, current: AttendanceStatus) -> AttendanceStatus:
        if work_minutes >= self.full_day_minutes:
            return AttendanceStatus.PRESENT
        if work_minutes >= self.half_day_minutes:
            return AttendanceStatus.HALF_DAY
        # short shifts are not downgraded
        return current
