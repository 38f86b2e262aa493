from datetime import datetime, timezone

from tests.conftest import auth_headers
from workforce.models.attendance import UserAttendance


def test_login_success(client, seed_users):
    resp = client.post("/api/auth/login", json={"email": "manager@example.com"})
    assert resp.status_code == 200
    data = resp.json()
    assert "access_token" in data
    assert data["user"]["role"] == "MANAGER"


def test_login_unknown_email(client, seed_users):
    resp = client.post("/api/auth/login", json={"email": "nobody@example.com"})
    assert resp.status_code == 401
    assert "error" in resp.json()


def test_login_opens_attendance(client, db, seed_users):
    auth_headers(client, "operator@example.com")
    attendance = db.query(UserAttendance).filter(
        UserAttendance.user_id == seed_users["operator"].user_id
    ).one()
    assert attendance.is_active_session is True


def test_me_authenticated(client, seed_users):
    headers = auth_headers(client, "manager@example.com")
    resp = client.get("/api/auth/me", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["email"] == "manager@example.com"


def test_me_unauthenticated(client):
    resp = client.get("/api/auth/me")
    assert resp.status_code in (401, 403)  # HTTPBearer raises 401 or 403 depending on version


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_logout_closes_attendance(client, db, seed_users, frozen_clock):
    frozen_clock.set(datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc))
    headers = auth_headers(client, "operator@example.com")

    frozen_clock.set(datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc))
    client.post("/api/attendance/break/start", headers=headers)

    frozen_clock.set(datetime(2026, 3, 2, 12, 20, tzinfo=timezone.utc))
    resp = client.post("/api/auth/logout", headers=headers)

    assert resp.status_code == 200
    data = resp.json()
    assert data["attendance_closed"] is True
    assert data["total_break_minutes"] == 20
    assert data["total_working_minutes"] == 180


def test_logout_without_attendance_still_succeeds(client, db, seed_users, frozen_clock):
    frozen_clock.set(datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc))
    headers = auth_headers(client, "operator@example.com")

    # 다음 날 로그아웃: 오늘 기록이 없다.
    frozen_clock.set(datetime(2026, 3, 3, 9, 0, tzinfo=timezone.utc))
    resp = client.post("/api/auth/logout", headers=headers)

    assert resp.status_code == 200
    assert resp.json()["attendance_closed"] is False


def test_invalid_token_is_rejected(client, seed_users):
    resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid or expired token"}


def test_inactive_user_token_is_rejected(client, db, seed_users):
    headers = auth_headers(client, "other@example.com")
    seed_users["other"].is_active = False
    db.commit()

    resp = client.get("/api/auth/me", headers=headers)
    assert resp.status_code == 401
