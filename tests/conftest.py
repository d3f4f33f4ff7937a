"""Shared fixtures: in-memory SQLite database, API client and authenticated users."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from smartpark.database import Base, create_tables, get_db
from smartpark.main import app
from smartpark.models.user import User, UserRole
from smartpark.services.auth_service import create_access_token, get_password_hash

from factories import TEST_PASSWORD


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    create_tables(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


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
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


def make_user(db, username="manager1", role=UserRole.MANAGER, password=TEST_PASSWORD):
    user = User(username=username, hashed_password=get_password_hash(password), role=role, is_active=True)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def manager(db):
    return make_user(db)


@pytest.fixture
def admin(db):
    return make_user(db, username="admin1", role=UserRole.ADMIN)


@pytest.fixture
def auth_headers(manager):
    return {"Authorization": f"Bearer {create_access_token(manager)}"}


@pytest.fixture
def admin_headers(admin):
    return {"Authorization": f"Bearer {create_access_token(admin)}"}
