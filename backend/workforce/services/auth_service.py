"""Auth Service 도메인 서비스 레이어입니다. 토큰 발급과 로컬 사용자 조회를 담당합니다."""

from datetime import datetime, timedelta, timezone
from jose import jwt
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from workforce.models.user import User
from workforce.config import settings

ALGORITHM = "HS256"


def create_access_token(user_id: int, role: str) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {"sub": str(user_id), "role": role, "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def sso_login(db: Session, email: str) -> User:
    # 자격 증명 검증은 외부 IdP가 끝낸 상태로 들어온다.
    user = db.query(User).filter(User.email == email, User.is_active == True).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"No active user found for '{email}'",
        )
    return user
