# tests/conftest.py
import os

# must be set before income_tracker.db.session is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from income_tracker.db import crud, models
from income_tracker.db.base import Base
from income_tracker.db.session import enable_sqlite_foreign_keys, get_db
from income_tracker.main import app
from income_tracker.services.security import create_access_token, hash_password


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
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


def make_user(db, username, password="secret123", role=models.Role.USER, approved=True, active=True, **extra):
    user = crud.create_user(
        db,
        username=username,
        email=extra.get("email", f"{username}@example.com"),
        phone=extra.get("phone", f"05{abs(hash(username)) % 10 ** 8:08d}"),
        name=extra.get("name", username.title()),
        password_hash=hash_password(password),
        role=role,
    )
    user.is_approved = approved or role == models.Role.ADMIN
    user.is_active = active
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user):
    token = create_access_token(user.id, username=user.username, email=user.email, role=user.role.value)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin(db):
    return make_user(db, "admin", password="admin123", role=models.Role.ADMIN, phone="0500000000")


@pytest.fixture
def member(db):
    return make_user(db, "member", phone="0511111111")


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def member_headers(member):
    return auth_headers(member)


@pytest.fixture
def entity(db):
    e = crud.create_entity(db, name="وزارة التجارة", province="الرياض")
    db.commit()
    db.refresh(e)
    return e


def income_payload(entity_id, user_id, **overrides):
    payload = {
        "amount": 15000,
        "dueDate": "2024-01-15",
        "entityId": entity_id,
        "month": 1,
        "year": 2024,
        "type": "SUBSCRIPTION",
        "userId": user_id,
    }
    payload.update(overrides)
    return payload
