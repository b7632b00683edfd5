import os
from datetime import date, datetime, time, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool


# Ensure settings are in place before the app (and config/security modules) are imported.
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["HABITS_TIMEZONE"] = "UTC"

from app.main import app  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.db.session import get_db  # noqa: E402
from app.catalog.catalog import seed_default_categories, list_categories  # noqa: E402
from app.core.security import create_access_token  # noqa: E402
from app.habits.registry import start_habit  # noqa: E402


NOW = datetime(2026, 3, 10, 15, 0, tzinfo=timezone.utc)
TODAY = date(2026, 3, 10)


def at(day: date, hour: int = 12) -> datetime:
    """A UTC instant on the given day."""
    return datetime.combine(day, time(hour), tzinfo=timezone.utc)


def auth_headers(user_id: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def categories(db):
    seed_default_categories(db)
    return list_categories(db)


@pytest.fixture()
def category_id(categories):
    return categories[0].id


@pytest.fixture()
def make_habit(db, category_id):
    def _make(user_id="alice", times_per_day=1, custom_amount=None, created=TODAY, reminder_times=()):
        return start_habit(
            db,
            user_id,
            category_id,
            times_per_day=times_per_day,
            custom_amount=custom_amount,
            reminder_times=reminder_times,
            now=at(created, hour=8),
        )
    return _make


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
