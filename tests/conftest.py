"""
Fuse API test configuration

[FIXTURES]
- settings: in-memory SQLite, fixed secret, fake AI endpoint
- app / client: a fresh application per test, lifespan started
- store: an EntityStore on its own in-memory database
- make_account: signs a user up and logs in, returns (user, headers)
"""
from typing import Callable, Dict, Tuple

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from fuse_server.core.config import Settings
from fuse_server.core.database import init_db, make_engine
from fuse_server.main import create_app
from fuse_server.services.store import EntityStore

TEST_PASSWORD = "correct-horse"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite://",
        db_host=None,
        jwt_secret_key="test-secret",
        algorithm="HS256",
        access_token_expire_minutes=30,
        ai_service_url="http://ai.studio.io/suggest",
        log_level="WARNING",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def store():
    engine = make_engine("sqlite://")
    init_db(engine)
    with Session(engine) as session:
        yield EntityStore(session)
    engine.dispose()


def bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_account(client) -> Callable[..., Tuple[dict, Dict[str, str]]]:
    def _make(email: str, password: str = TEST_PASSWORD, **fields):
        response = client.post("/auth/signup", json={"email": email, "password": password, **fields})
        assert response.status_code == 201, response.text
        login = client.post("/auth/login", json={"email": email, "password": password})
        assert login.status_code == 200, login.text
        return response.json(), bearer(login.json()["token"])

    return _make


@pytest.fixture
def alice(make_account):
    return make_account("alice@studio.io", username="alice")


@pytest.fixture
def bob(make_account):
    return make_account("bob@studio.io", username="bob")
