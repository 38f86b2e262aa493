"""Permissions 관련 공용 상수입니다."""

MANAGER = "MANAGER"
OPERATOR = "OPERATOR"
