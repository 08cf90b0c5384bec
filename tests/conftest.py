"""
Shared fixtures.

The app is built with ``create_app`` against an in-memory SQLite database,
a fakeredis server and a fake Stripe PaymentIntent resource, so the tests
need no running services.
"""
import os
from types import SimpleNamespace

# settings are read at import time, the app will not start without a secret
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-0123456789abcdef-0123")

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from storefront.api import create_app, init_db
from storefront.celery_worker import celery_app
from storefront.data.database import create_session_factory


class FakePaymentIntents:
    """Stands in for ``stripe.PaymentIntent``; records every create() call."""

    def __init__(self):
        self.status = "succeeded"
        self.error = None
        self.calls = []

    def create(self, **params):
        self.calls.append(params)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(
            id="pi_test_123",
            status=self.status,
            client_secret="pi_test_123_secret_abc",
            amount=params["amount"],
        )


@pytest.fixture(autouse=True, scope="session")
def eager_celery():
    celery_app.conf.update(task_always_eager=True, task_eager_propagates=True)
    yield


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield eng
    eng.dispose()


@pytest.fixture
def db_session(engine):
    init_db(engine)
    session = create_session_factory(engine)()
    yield session
    session.close()


@pytest.fixture
def redis_client():
    return fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture
def payment_intents():
    return FakePaymentIntents()


@pytest.fixture
def app(engine, redis_client, payment_intents):
    return create_app(engine=engine, redis_client=redis_client, payment_intents=payment_intents)


@pytest.fixture
def test_client(app):
    with TestClient(app) as client:
        yield client


def signup(client: TestClient, email: str = "ada@example.com", password: str = "secret123", name: str = "Ada"):
    return client.post("/api/signup", json={"name": name, "email": email, "password": password})


@pytest.fixture
def auth_headers(test_client: TestClient):
    response = signup(test_client)
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['token']}"}
