"""근태/휴식 API 라우터입니다. 요청 사용자와 현재 시각을 확인하고 서비스 레이어로 위임합니다."""

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from workforce.database import get_db
from workforce.middleware.auth_middleware import get_current_user, require_roles
from workforce.models.user import User
from workforce.schemas.attendance import (
    BreakEndOut,
    BreakStartOut,
    CurrentAttendanceOut,
    TodayAttendanceOut,
    UserAttendanceOut,
)
from workforce.services import attendance_service
from workforce.utils import clock
from workforce.utils.permissions import MANAGER

router = APIRouter(prefix="/api/attendance", tags=["attendance"])


@router.post("/break/start", response_model=BreakStartOut)
def start_break(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    entry = attendance_service.start_break(current_user.user_id, clock.utc_now(), db)
    return BreakStartOut(break_start_time=entry.break_start)


@router.post("/break/end", response_model=BreakEndOut)
def end_break(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    minutes = attendance_service.end_break(current_user.user_id, clock.utc_now(), db)
    return BreakEndOut(break_minutes=minutes)


@router.get("/current", response_model=CurrentAttendanceOut)
def get_current(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return attendance_service.get_current_status(current_user.user_id, clock.utc_now(), db)


@router.get("/today", response_model=TodayAttendanceOut)
def get_today(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    status = attendance_service.get_current_status(current_user.user_id, clock.utc_now(), db)
    return TodayAttendanceOut(
        on_break=status["is_on_break"],
        break_start_time=status["break_start_time"],
        login_time=status["login_time"],
    )


@router.get("/records", response_model=List[UserAttendanceOut])
def list_daily_attendance(
    work_date: date | None = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(MANAGER)),
):
    target_date = work_date or clock.work_date_for(clock.utc_now())
    return attendance_service.list_daily_attendance(target_date, db)
