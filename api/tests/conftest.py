"""
Pytest configuration and fixtures for forum tests.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from forum.core.config import settings
from forum.core.database import get_session
from forum.main import app
from forum.models import models  # noqa: F401
from tests import factories


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite database shared by every connection of a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        for factory_class in factories.SESSION_FACTORIES:
            factory_class._meta.sqlalchemy_session = session
        yield session
        for factory_class in factories.SESSION_FACTORIES:
            factory_class._meta.sqlalchemy_session = None


@pytest.fixture(autouse=True)
def forum_settings(monkeypatch):
    """Site settings most tests expect; individual tests override them."""
    monkeypatch.setattr(settings, "rate_limits_enabled", False)
    monkeypatch.setattr(settings, "allow_duplicate_topic_titles", False)
    monkeypatch.setattr(settings, "title_fancy_entities", False)
    monkeypatch.setattr(settings, "base_url", "http://forum.test")
    return settings


@pytest.fixture(name="client")
def client_fixture(session):
    def get_session_override():
        yield session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def user(session):
    return factories.UserFactory()


@pytest.fixture
def moderator(session):
    return factories.UserFactory(moderator=True)


@pytest.fixture
def admin(session):
    return factories.UserFactory(admin=True)


@pytest.fixture
def category(session, user):
    return factories.CategoryFactory(user=user)
