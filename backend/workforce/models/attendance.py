"""사용자/일자 단위 근태 기록과 휴식 로그 모델 정의입니다."""

from sqlalchemy import Column, Integer, Date, DateTime, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from workforce.database import Base


class UserAttendance(Base):
    __tablename__ = "user_attendance"

    attendance_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    work_date = Column(Date, nullable=False)
    login_time = Column(DateTime(timezone=True), nullable=False)
    logout_time = Column(DateTime(timezone=True), nullable=True)
    is_active_session = Column(Boolean, nullable=False, default=True)
    # 현재 진행 중인 휴식의 미러 (start 있음 + end 없음 = 휴식 중)
    break_start_time = Column(DateTime(timezone=True), nullable=True)
    break_end_time = Column(DateTime(timezone=True), nullable=True)
    total_break_minutes = Column(Integer, nullable=False, default=0)
    # 로그아웃 시점에만 계산된다.
    total_working_minutes = Column(Integer, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="attendances")
    break_logs = relationship(
        "BreakLog",
        back_populates="attendance",
        cascade="all, delete-orphan",
        order_by="BreakLog.break_log_id",
    )

    __table_args__ = (
        UniqueConstraint("user_id", "work_date", name="uq_user_attendance_user_date"),
    )


class BreakLog(Base):
    __tablename__ = "break_log"

    break_log_id = Column(Integer, primary_key=True, autoincrement=True)
    attendance_id = Column(
        Integer,
        ForeignKey("user_attendance.attendance_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    break_start = Column(DateTime(timezone=True), nullable=False)
    break_end = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)

    attendance = relationship("UserAttendance", back_populates="break_logs")
