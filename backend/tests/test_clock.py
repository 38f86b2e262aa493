from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from workforce.config import Settings, settings
from workforce.utils import clock


def test_as_utc_tags_naive_values():
    naive = datetime(2026, 3, 2, 9, 0)
    assert clock.as_utc(naive) == datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)
    assert clock.as_utc(None) is None


def test_minute_rounding():
    start = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)
    end = datetime(2026, 3, 2, 9, 14, 59, tzinfo=timezone.utc)
    assert clock.floor_minutes(start, end) == 14
    assert clock.ceil_minutes(start, end) == 15
    assert clock.ceil_minutes(start, datetime(2026, 3, 2, 9, 15, tzinfo=timezone.utc)) == 15


def test_work_date_uses_configured_timezone(monkeypatch):
    moment = datetime(2026, 3, 2, 23, 30, tzinfo=timezone.utc)
    assert clock.work_date_for(moment) == date(2026, 3, 2)

    monkeypatch.setattr(settings, "ATTENDANCE_TIMEZONE", "America/New_York", raising=False)
    assert clock.work_date_for(moment) == date(2026, 3, 2)
    monkeypatch.setattr(settings, "ATTENDANCE_TIMEZONE", "Asia/Tokyo", raising=False)
    assert clock.work_date_for(moment) == date(2026, 3, 3)


def test_unknown_reporting_timezone_is_rejected_at_load():
    with pytest.raises(ValidationError):
        Settings(ATTENDANCE_TIMEZONE="Mars/Olympus")

    assert Settings(ATTENDANCE_TIMEZONE="Asia/Seoul").ATTENDANCE_TIMEZONE == "Asia/Seoul"
