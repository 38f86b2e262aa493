"""User 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from workforce.database import Base


class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(120), unique=True, nullable=False)
    name = Column(String(100), nullable=False)
    department = Column(String(100))
    role = Column(String(20), nullable=False)  # MANAGER/OPERATOR
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, server_default=func.now())

    attendances = relationship("UserAttendance", back_populates="user")
