import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("RATE_LIMIT_BACKEND", "memory")

sys.path.append(str(Path(__file__).resolve().parents[1]))

from pawpal.core.rate_limiter import rate_limiter
from pawpal.db.base import Base
from pawpal.db.models import Appointment, DietPlan, HealthRecord, Pet, User, Vaccination  # noqa: F401
from pawpal.db.session import get_db
from pawpal.main import app

TEST_DATABASE_URL = "sqlite+pysqlite:///:memory:"
TEST_PASSWORD = "StrongPass123!"
engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def reset_database() -> None:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    rate_limiter.reset()


@pytest.fixture()
def db_session():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client() -> TestClient:
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def register_and_login(client):
    def _register_and_login(email: str, name: str = "Pet Owner") -> dict[str, str]:
        client.post("/auth/register", json={"email": email, "password": TEST_PASSWORD, "name": name})
        login = client.post("/auth/login", json={"email": email, "password": TEST_PASSWORD})
        return {"Authorization": f"Bearer {login.json()['access_token']}"}

    return _register_and_login


@pytest.fixture()
def auth_headers(register_and_login) -> dict[str, str]:
    return register_and_login("owner@example.com")


@pytest.fixture()
def pet_id(client, auth_headers) -> int:
    response = client.post("/pets", headers=auth_headers, json={"name": "Biscuit", "species": "dog"})
    return response.json()["id"]
