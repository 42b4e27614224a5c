"""Shared fixtures: an isolated in-memory database and an API client bound to it."""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.security import create_access_token, hash_password
from database import init_db, models
from database.deps import get_db_read, get_db_write

PASSWORD = "gizli123"


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    init_db(engine, TestingSessionLocal)
    yield TestingSessionLocal
    engine.dispose()


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def api(session_factory):
    """TestClient with both DB dependencies routed to the in-memory database.

    The client is not entered as a context manager so the lifespan hook
    does not touch the default database file.
    """
    from main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db_write] = override_get_db
    app.dependency_overrides[get_db_read] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(db, email="ayse@diyetim.com.tr", name="Ayşe Yılmaz", password=PASSWORD, **extra):
    user = models.User(email=email, name=name, password_hash=hash_password(password), **extra)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_client(db, user, name="Mehmet Demir", email="mehmet@diyetim.com.tr", **extra):
    fields = {"gender": "male", "height": 178.0, "starting_weight": 92.0, "target_weight": 80.0}
    fields.update(extra)
    client = models.Client(user_id=user.id, name=name, email=email, **fields)
    db.add(client)
    db.commit()
    db.refresh(client)
    return client


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id, user.email)}"}


@pytest.fixture()
def user(db):
    return make_user(db)


@pytest.fixture()
def other_user(db):
    return make_user(db, email="can@diyetim.com.tr", name="Can Öztürk")


@pytest.fixture()
def headers(user):
    return auth_headers(user)


@pytest.fixture()
def other_headers(other_user):
    return auth_headers(other_user)


@pytest.fixture()
def client_record(db, user):
    return make_client(db, user)
