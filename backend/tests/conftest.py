import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from workforce.database import Base, get_db
from workforce.main import app
from workforce.models.user import User
from workforce.utils import clock

TEST_DB_URL = "sqlite:///./test_workforce.db"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def seed_users(db):
    users = {
        "manager": User(email="manager@example.com", name="Manager", role="MANAGER", department="Ops"),
        "operator": User(email="operator@example.com", name="Operator", role="OPERATOR", department="Ops"),
        "other": User(email="other@example.com", name="Other", role="OPERATOR", department="Support"),
    }
    for u in users.values():
        db.add(u)
    db.commit()
    for u in users.values():
        db.refresh(u)
    return users


@pytest.fixture
def frozen_clock(monkeypatch):
    """clock.utc_now를 고정하고 set(dt)으로 옮길 수 있는 시계를 돌려준다."""

    class FrozenClock:
        def __init__(self):
            self.now = None

        def set(self, value):
            self.now = value

    frozen = FrozenClock()
    monkeypatch.setattr(clock, "utc_now", lambda: frozen.now)
    return frozen


def get_token(client, email: str) -> str:
    resp = client.post("/api/auth/login", json={"email": email})
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


def auth_headers(client, email: str) -> dict:
    return {"Authorization": f"Bearer {get_token(client, email)}"}
