"""
Shared test fixtures.

The database module resolves its engine at import time, so the environment is set
before anything under app/ is imported: an in-memory SQLite database and rate
limiting switched off.

Author: @kcaparas1630
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("VAPI_WORKFLOW_ID", "workflow-test")

import pytest
from typing import List, Optional
from app.database import SessionLocal, create_tables, drop_tables
from app.models.user_models import Interview, Profile, User


@pytest.fixture(autouse=True)
def database():
    create_tables()
    yield
    drop_tables()


@pytest.fixture
def make_user():
    def _make_user(user_id: str = "user-1", credits: Optional[int] = 3, experience: Optional[int] = None) -> str:
        with SessionLocal() as db:
            db.add(User(id=user_id, name="Ada", credits=credits))
            if experience is not None:
                db.add(Profile(id=user_id, experience=experience))
            db.commit()
        return user_id
    return _make_user


@pytest.fixture
def make_interview():
    def _make_interview(user_id: str = "user-1", questions: Optional[List[str]] = None) -> str:
        with SessionLocal() as db:
            interview = Interview(
                user_id=user_id,
                role="Backend Engineer",
                level="junior",
                interview_type="technical",
                techstack=["python", "postgres"],
                questions=questions or ["Tell me about yourself."],
            )
            db.add(interview)
            db.commit()
            return interview.id
    return _make_interview
