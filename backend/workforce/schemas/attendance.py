"""근태/휴식 요청·응답 스키마입니다. 클라이언트 계약에 맞춰 camelCase 키로 직렬화합니다."""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel

from workforce.utils.clock import as_utc

CAMEL_CONFIG = {"alias_generator": to_camel, "populate_by_name": True, "from_attributes": True}


class _UtcModel(BaseModel):
    @field_validator("*", mode="after")
    @classmethod
    def _tag_utc(cls, value):
        if isinstance(value, datetime):
            return as_utc(value)
        return value


class BreakStartOut(_UtcModel):
    message: str = "Break started"
    break_start_time: datetime

    model_config = CAMEL_CONFIG


class BreakEndOut(BaseModel):
    message: str = "Break ended"
    break_minutes: int

    model_config = CAMEL_CONFIG


class CurrentAttendanceOut(_UtcModel):
    is_on_break: bool
    login_time: Optional[datetime] = None
    break_start_time: Optional[datetime] = None

    model_config = CAMEL_CONFIG


class TodayAttendanceOut(_UtcModel):
    on_break: bool
    break_start_time: Optional[datetime] = None
    login_time: Optional[datetime] = None

    model_config = CAMEL_CONFIG


class BreakLogOut(_UtcModel):
    break_log_id: int
    break_start: datetime
    break_end: Optional[datetime] = None

    model_config = CAMEL_CONFIG


class UserAttendanceOut(_UtcModel):
    attendance_id: int
    user_id: int
    work_date: date
    login_time: datetime
    logout_time: Optional[datetime] = None
    is_active_session: bool
    break_start_time: Optional[datetime] = None
    break_end_time: Optional[datetime] = None
    total_break_minutes: int
    total_working_minutes: Optional[int] = None
    break_logs: List[BreakLogOut] = []

    model_config = CAMEL_CONFIG
