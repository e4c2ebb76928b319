"""Shared fixtures: in-memory database, API client and a logged-in user."""

import os

os.environ.setdefault("TJ_DATABASE_URL", "sqlite://")
os.environ.setdefault("TJ_JWT_SECRET", "test-secret")

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from journal.database import create_db_and_tables, get_session
from journal.main import app
from journal.models.profile import Profile
from journal.models.trade import Trade
from journal.models.user import User
from journal.services.auth import create_access_token, hash_password


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def user(session) -> User:
    user = User(username="trader", hashed_password=hash_password("correct-horse"))
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def other_user(session) -> User:
    user = User(username="someone-else", hashed_password=hash_password("battery-staple"))
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def profile(session, user) -> Profile:
    profile = Profile(owner_id=user.id, initial_balance=1000.0, risk_per_trade_percent=1.0)
    session.add(profile)
    session.commit()
    session.refresh(profile)
    return profile


@pytest.fixture
def client(engine):
    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def make_trade(**overrides) -> Trade:
    """Unsaved trade with sensible defaults for aggregation tests."""
    values = {
        "owner_id": 1,
        "pair": "EURUSD",
        "op": 1.1,
        "status": "closed",
        "result": 0.0,
        "risk_usd": 10.0,
        "open_date": utc(2026, 1, 1, 9, 0),
        "close_date": None,
    }
    values.update(overrides)
    return Trade(**values)
