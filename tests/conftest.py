"""
Shared fixtures for the pytest suite.
"""
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from outreach.database import Base, init_db
from outreach.dependencies import get_contact_repository
from outreach.main import app
from outreach.repositories import InMemoryContactRepository, SqlContactRepository
from outreach.services.auth_service import AuthService

RUN_DATE = date(2025, 11, 17)


@pytest.fixture
def run_date():
    return RUN_DATE


@pytest.fixture
def memory_repository():
    return InMemoryContactRepository()


@pytest.fixture
def db_session():
    """Session on a private in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = Session()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def sql_repository(db_session):
    return SqlContactRepository(db_session)


@pytest.fixture(params=["memory", "sql"])
def repository(request):
    """Runs a test against both repository implementations."""
    if request.param == "memory":
        return request.getfixturevalue("memory_repository")
    return request.getfixturevalue("sql_repository")


@pytest.fixture
def auth_headers():
    token = AuthService().create_access_token("user-1")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_auth_headers():
    token = AuthService().create_access_token("user-2")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(memory_repository):
    app.dependency_overrides[get_contact_repository] = lambda: memory_repository
    yield TestClient(app)
    app.dependency_overrides.clear()
