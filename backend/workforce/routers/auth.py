"""Auth 기능 API 라우터입니다. 로그인/로그아웃 시 근태 세션을 함께 열고 닫습니다."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from workforce.database import get_db
from workforce.schemas.user import LoginRequest, LogoutResponse, TokenResponse, UserOut
from workforce.services.auth_service import create_access_token, sso_login
from workforce.services import attendance_service
from workforce.middleware.auth_middleware import get_current_user
from workforce.models.user import User
from workforce.utils import clock

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    user = sso_login(db, request.email)
    attendance_service.open_or_resume_session(user.user_id, clock.utc_now(), db)
    token = create_access_token(user.user_id, user.role)
    logger.info("[auth] user %s logged in", user.user_id)
    return TokenResponse(access_token=token, user=UserOut.model_validate(user))


@router.post("/logout", response_model=LogoutResponse)
def logout(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    attendance = attendance_service.close_session(current_user.user_id, clock.utc_now(), db)
    logger.info("[auth] user %s logged out", current_user.user_id)
    if attendance is None:
        return LogoutResponse(message="Logged out successfully", attendance_closed=False)
    return LogoutResponse(
        message="Logged out successfully",
        attendance_closed=True,
        total_working_minutes=attendance.total_working_minutes,
        total_break_minutes=attendance.total_break_minutes,
    )


@router.get("/me", response_model=UserOut)
def me(current_user: User = Depends(get_current_user)):
    return current_user
