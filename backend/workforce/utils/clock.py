"""근태 계산용 시간 유틸리티입니다. 모든 시각은 UTC로 다루고, 일자 경계만 설정된 타임존을 따릅니다."""

from datetime import date, datetime, timedelta
from typing import Optional

import pytz

from workforce.config import settings

ONE_MINUTE = timedelta(minutes=1)


def utc_now() -> datetime:
    return datetime.now(pytz.UTC)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite처럼 tzinfo를 버리는 백엔드에서 읽은 값은 UTC로 간주한다."""
    if value is None:
        return None
    if value.tzinfo is None:
        return pytz.UTC.localize(value)
    return value.astimezone(pytz.UTC)


def reporting_timezone() -> pytz.BaseTzInfo:
    return pytz.timezone(settings.ATTENDANCE_TIMEZONE)


def work_date_for(moment: datetime) -> date:
    """moment가 속한 근무일 (설정 타임존 자정 기준)."""
    return as_utc(moment).astimezone(reporting_timezone()).date()


def floor_minutes(start: datetime, end: datetime) -> int:
    return (as_utc(end) - as_utc(start)) // ONE_MINUTE


def ceil_minutes(start: datetime, end: datetime) -> int:
    return -((as_utc(start) - as_utc(end)) // ONE_MINUTE)
