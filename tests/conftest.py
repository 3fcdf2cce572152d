import os
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("ENV", "test")

import dashboard.db.session as db_module  # noqa: E402
from dashboard.core.operators import create_operator  # noqa: E402
from dashboard.db.base import Base  # noqa: E402
from dashboard.main import app  # noqa: E402
from dashboard.models.signup import Signup  # noqa: E402
from dashboard.models.user import User  # noqa: E402,F401

OPERATOR_USERNAME = "admin"
OPERATOR_PASSWORD = "123456"


@pytest.fixture
def session_factory(tmp_path, monkeypatch):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'dashboard.db'}",
        connect_args={"check_same_thread": False},
    )
    SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    monkeypatch.setattr(db_module, "engine", engine)
    monkeypatch.setattr(db_module, "SessionLocal", SessionLocal)
    Base.metadata.create_all(bind=engine)
    yield SessionLocal
    engine.dispose()


@pytest.fixture
def client(session_factory):
    return TestClient(app)


@pytest.fixture
def operator(session_factory):
    with session_factory() as db:
        return create_operator(db, OPERATOR_USERNAME, OPERATOR_PASSWORD)


@pytest.fixture
def auth_client(client, operator):
    resp = client.post(
        "/auth/login",
        json={"username": OPERATOR_USERNAME, "password": OPERATOR_PASSWORD},
    )
    assert resp.status_code == 200
    return client


def make_signup(**fields) -> Signup:
    fields.setdefault("email", "someone@example.com")
    fields.setdefault("signup_date", datetime.now(timezone.utc))
    return Signup(**fields)


@pytest.fixture
def add_signups(session_factory):
    def _add(*signups: Signup):
        with session_factory() as db:
            db.add_all(signups)
            db.commit()

    return _add
