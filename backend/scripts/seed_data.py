"""Seed the database with test data."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from workforce.database import SessionLocal, engine, Base
import workforce.models  # noqa: F401

from workforce.models.user import User
from workforce.utils.permissions import MANAGER, OPERATOR


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.query(User).count() > 0:
            print("Database already seeded. Skipping.")
            return

        users = [
            User(email="manager@company.com", name="manager", department="Operations", role=MANAGER),
            User(email="operator1@company.com", name="operator1", department="Operations", role=OPERATOR),
            User(email="operator2@company.com", name="operator2", department="Support", role=OPERATOR),
        ]
        db.add_all(users)
        db.commit()
        print(f"Seeded {len(users)} users.")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
