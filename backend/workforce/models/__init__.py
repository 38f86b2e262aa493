"""SQLAlchemy 모델 패키지 초기화 모듈입니다."""

from workforce.models.user import User
from workforce.models.attendance import UserAttendance, BreakLog

__all__ = [
    "User",
    "UserAttendance", "BreakLog",
]
