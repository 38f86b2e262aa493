"""Attendance Service 도메인 서비스 레이어입니다. 일자별 근태 세션과 휴식 장부(break ledger)를 관리합니다."""

import logging
from datetime import date, datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from workforce.models.attendance import BreakLog, UserAttendance
from workforce.utils.clock import as_utc, ceil_minutes, floor_minutes, work_date_for

logger = logging.getLogger(__name__)


def get_attendance(
    user_id: int, work_date: date, db: Session, with_breaks: bool = False
) -> Optional[UserAttendance]:
    query = db.query(UserAttendance)
    if with_breaks:
        query = query.options(selectinload(UserAttendance.break_logs))
    return query.filter(
        UserAttendance.user_id == user_id,
        UserAttendance.work_date == work_date,
    ).first()


def list_daily_attendance(work_date: date, db: Session) -> list[UserAttendance]:
    return (
        db.query(UserAttendance)
        .options(selectinload(UserAttendance.break_logs))
        .filter(UserAttendance.work_date == work_date)
        .order_by(UserAttendance.login_time.asc())
        .all()
    )


def is_on_break(attendance: UserAttendance) -> bool:
    return attendance.break_start_time is not None and attendance.break_end_time is None


def _latest_open_break(attendance: UserAttendance) -> Optional[BreakLog]:
    open_breaks = [b for b in attendance.break_logs if b.break_end is None]
    if not open_breaks:
        return None
    if len(open_breaks) > 1:
        logger.warning(
            "[attendance] %d open break entries on attendance %s (ids=%s); closing only the latest",
            len(open_breaks),
            attendance.attendance_id,
            [b.break_log_id for b in open_breaks],
        )
    return max(open_breaks, key=lambda b: (as_utc(b.created_at), b.break_log_id))


def _break_minutes(entry: BreakLog, now: datetime) -> int:
    return max(0, ceil_minutes(entry.break_start, now))


def _persistence_failure(db: Session, message: str, exc: Exception) -> HTTPException:
    db.rollback()
    logger.exception("[attendance] %s: %s", message, exc)
    return HTTPException(status_code=500, detail=message)


# ---------------------------------------------------------------------------
# Session manager
# ---------------------------------------------------------------------------


def open_or_resume_session(user_id: int, now: datetime, db: Session) -> UserAttendance:
    """로그인 시 오늘 근태 기록을 만들거나 다시 활성화한다. login_time은 최초 로그인 값을 유지한다."""
    work_date = work_date_for(now)
    attendance = get_attendance(user_id, work_date, db)
    if attendance is None:
        attendance = UserAttendance(
            user_id=user_id,
            work_date=work_date,
            login_time=now,
            is_active_session=True,
            total_break_minutes=0,
        )
        db.add(attendance)
        try:
            db.commit()
        except IntegrityError:
            # 동시 로그인으로 같은 (user, date) 행이 먼저 생성된 경우
            db.rollback()
            attendance = get_attendance(user_id, work_date, db)
            if attendance is None:
                raise HTTPException(status_code=500, detail="Failed to start attendance")
        except SQLAlchemyError as exc:
            raise _persistence_failure(db, "Failed to start attendance", exc)
        else:
            db.refresh(attendance)
            logger.info("[attendance] started attendance %s for user %s", attendance.attendance_id, user_id)
            return attendance

    attendance.is_active_session = True
    try:
        db.commit()
    except SQLAlchemyError as exc:
        raise _persistence_failure(db, "Failed to start attendance", exc)
    db.refresh(attendance)
    logger.info("[attendance] resumed attendance %s for user %s", attendance.attendance_id, user_id)
    return attendance


def close_session(user_id: int, now: datetime, db: Session) -> Optional[UserAttendance]:
    """로그아웃 시 근태를 마감한다. 활성 기록이 없으면 None을 돌려주고 로그아웃 자체는 막지 않는다."""
    attendance = get_attendance(user_id, work_date_for(now), db, with_breaks=True)
    if attendance is None or not attendance.is_active_session:
        logger.info("[attendance] no active attendance to close for user %s", user_id)
        return None

    attendance_id = attendance.attendance_id
    open_break = _latest_open_break(attendance)
    elapsed = floor_minutes(attendance.login_time, now)
    try:
        # 휴식 중 로그아웃: 열린 휴식을 먼저 닫고 방금 닫은 시간만 더한다.
        # 동시에 end_break가 닫았다면 0행이 갱신되고 그쪽에서 이미 적립했다.
        added_minutes = 0
        if open_break is not None:
            closed = (
                db.query(BreakLog)
                .filter(BreakLog.break_log_id == open_break.break_log_id, BreakLog.break_end.is_(None))
                .update({BreakLog.break_end: now}, synchronize_session=False)
            )
            if closed:
                added_minutes = _break_minutes(open_break, now)

        updated = (
            db.query(UserAttendance)
            .filter(UserAttendance.attendance_id == attendance_id, UserAttendance.is_active_session == True)
            .update(
                {
                    UserAttendance.logout_time: now,
                    UserAttendance.total_break_minutes: UserAttendance.total_break_minutes + added_minutes,
                    UserAttendance.is_active_session: False,
                    UserAttendance.break_start_time: None,
                    UserAttendance.break_end_time: None,
                },
                synchronize_session=False,
            )
        )
        if updated == 0:
            # 다른 로그아웃 요청이 먼저 마감했다.
            db.rollback()
            return None

        total_break_minutes = (
            db.query(UserAttendance.total_break_minutes)
            .filter(UserAttendance.attendance_id == attendance_id)
            .scalar()
        )
        db.query(UserAttendance).filter(UserAttendance.attendance_id == attendance_id).update(
            {UserAttendance.total_working_minutes: max(elapsed - total_break_minutes, 0)},
            synchronize_session=False,
        )
        db.commit()
    except SQLAlchemyError as exc:
        raise _persistence_failure(db, "Failed to close attendance", exc)
    db.refresh(attendance)
    logger.info(
        "[attendance] closed attendance %s: worked=%s break=%s",
        attendance.attendance_id,
        attendance.total_working_minutes,
        attendance.total_break_minutes,
    )
    return attendance


def get_current_status(user_id: int, now: datetime, db: Session) -> dict:
    attendance = get_attendance(user_id, work_date_for(now), db)
    if attendance is None:
        return {"is_on_break": False, "login_time": None, "break_start_time": None}
    return {
        "is_on_break": is_on_break(attendance),
        "login_time": as_utc(attendance.login_time),
        "break_start_time": as_utc(attendance.break_start_time),
    }


# ---------------------------------------------------------------------------
# Break ledger
# ---------------------------------------------------------------------------


def start_break(user_id: int, now: datetime, db: Session) -> BreakLog:
    attendance = get_attendance(user_id, work_date_for(now), db)
    if attendance is None:
        raise HTTPException(status_code=400, detail="Attendance not found")
    if not attendance.is_active_session:
        raise HTTPException(status_code=400, detail="No active session")
    if is_on_break(attendance):
        raise HTTPException(status_code=400, detail="Break already active")

    try:
        # 확인과 기록 사이에 다른 요청이 휴식을 시작했다면 0행이 갱신된다.
        updated = (
            db.query(UserAttendance)
            .filter(
                UserAttendance.attendance_id == attendance.attendance_id,
                or_(
                    UserAttendance.break_start_time.is_(None),
                    UserAttendance.break_end_time.isnot(None),
                ),
            )
            .update(
                {UserAttendance.break_start_time: now, UserAttendance.break_end_time: None},
                synchronize_session=False,
            )
        )
        if updated == 0:
            db.rollback()
            raise HTTPException(status_code=400, detail="Break already active")

        entry = BreakLog(
            attendance_id=attendance.attendance_id,
            break_start=now,
            break_end=None,
            created_at=now,
        )
        db.add(entry)
        db.commit()
    except SQLAlchemyError as exc:
        raise _persistence_failure(db, "Failed to start break", exc)

    db.refresh(entry)
    logger.info("[attendance] break %s started on attendance %s", entry.break_log_id, attendance.attendance_id)
    return entry


def end_break(user_id: int, now: datetime, db: Session) -> int:
    """가장 최근에 열린 휴식을 닫고 이번에 적립된 분을 돌려준다."""
    attendance = get_attendance(user_id, work_date_for(now), db, with_breaks=True)
    if attendance is None:
        raise HTTPException(status_code=400, detail="Attendance not found")
    if attendance.break_start_time is None:
        raise HTTPException(status_code=400, detail="No active break")

    open_break = _latest_open_break(attendance)
    if open_break is None:
        raise HTTPException(status_code=400, detail="No open break found")

    break_minutes = _break_minutes(open_break, now)
    try:
        closed = (
            db.query(BreakLog)
            .filter(BreakLog.break_log_id == open_break.break_log_id, BreakLog.break_end.is_(None))
            .update({BreakLog.break_end: now}, synchronize_session=False)
        )
        if closed == 0:
            db.rollback()
            raise HTTPException(status_code=400, detail="No active break")

        db.query(UserAttendance).filter(
            UserAttendance.attendance_id == attendance.attendance_id
        ).update(
            {
                UserAttendance.break_end_time: now,
                UserAttendance.break_start_time: None,
                UserAttendance.total_break_minutes: UserAttendance.total_break_minutes + break_minutes,
            },
            synchronize_session=False,
        )
        db.commit()
    except SQLAlchemyError as exc:
        raise _persistence_failure(db, "Failed to end break", exc)

    logger.info(
        "[attendance] break %s ended on attendance %s (+%d min)",
        open_break.break_log_id,
        attendance.attendance_id,
        break_minutes,
    )
    return break_minutes
