"""Shared pytest fixtures: one app per storage backend."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from app import create_app
from configs import db
from dao.database import DatabaseStorage
from dao.memory import InMemoryStorage
from dao.storage import get_storage
from db.models.user import UserRole
from utils.passwords import hash_password

BASE_CONFIG = {"TESTING": True, "SECRET_KEY": "test-secret", "LOG_LEVEL": "WARNING"}


class TickingClock:
    """Advances one second per call so newest-first ordering is deterministic."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 8, 0, 0)):
        self.current = start

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture(params=["memory", "database"])
def app(request, clock):
    if request.param == "database":
        app = create_app(
            dict(BASE_CONFIG, SQLALCHEMY_DATABASE_URI="sqlite://"),
            storage=DatabaseStorage(clock=clock),
        )
        with app.app_context():
            db.create_all()
        yield app
        with app.app_context():
            db.drop_all()
    else:
        app = create_app(
            dict(BASE_CONFIG, SQLALCHEMY_DATABASE_URI=None),
            storage=InMemoryStorage(clock=clock),
        )
        yield app


@pytest.fixture
def memory_app(clock):
    return create_app(
        dict(BASE_CONFIG, SQLALCHEMY_DATABASE_URI=None),
        storage=InMemoryStorage(clock=clock),
    )


@pytest.fixture
def storage(app):
    with app.app_context():
        yield get_storage()


@pytest.fixture
def client(app):
    return app.test_client()


def make_user(app, email, role=UserRole.EMPLOYEE, password=None, name=("Test", "User")):
    with app.app_context():
        user = get_storage().upsert_user(
            email=email,
            first_name=name[0],
            last_name=name[1],
            role=role,
            password_hash=hash_password(password) if password else None,
        )
        return user.id


def make_material(app, **overrides):
    data = {"name": "Bolt", "code": "B-1", "unit": "un", "minimum_stock": 10}
    data.update(overrides)
    with app.app_context():
        return get_storage().create_material(data).id


def login(client, email, password):
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return resp


@pytest.fixture
def admin_client(app):
    make_user(app, "admin@example.com", UserRole.ADMIN, "admin-pass", ("Ada", "Admin"))
    client = app.test_client()
    login(client, "admin@example.com", "admin-pass")
    return client


@pytest.fixture
def stock_client(app):
    make_user(app, "stock@example.com", UserRole.STOCK, "stock-pass", ("Sam", "Stock"))
    client = app.test_client()
    login(client, "stock@example.com", "stock-pass")
    return client
