from __future__ import annotations

import pytest

from dayflow_hrms.attendance.status import ThresholdStatusPolicy
from dayflow_hrms.core.enums import AttendanceStatus


@pytest.mark.parametrize(
    "minutes, current, expected",
    [
        (360, AttendanceStatus.ABSENT, AttendanceStatus.PRESENT),
        (600, AttendanceStatus.HALF_DAY, AttendanceStatus.PRESENT),
        (359, AttendanceStatus.PRESENT, AttendanceStatus.HALF_DAY),
        (180, AttendanceStatus.PRESENT, AttendanceStatus.HALF_DAY),
        (179, AttendanceStatus.PRESENT, AttendanceStatus.PRESENT),
        (0, AttendanceStatus.LEAVE, AttendanceStatus.LEAVE),
    ],
)
def test_default_thresholds(minutes, current, expected):
    assert ThresholdStatusPolicy().derive(minutes, current) == expected


def test_custom_thresholds():
    policy = ThresholdStatusPolicy(full_day_minutes=480, half_day_minutes=240)

    assert policy.derive(479, AttendanceStatus.PRESENT) == AttendanceStatus.HALF_DAY
    assert policy.derive(480, AttendanceStatus.ABSENT) == AttendanceStatus.PRESENT
    assert policy.derive(200, AttendanceStatus.ABSENT) == AttendanceStatus.ABSENT
