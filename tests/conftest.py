"""
Shared fixtures for the registration service tests.

Every app under test is built with an in-memory store so no test touches
DynamoDB or MongoDB.
"""

import pytest
from fastapi.testclient import TestClient

from config import Settings
from database import InMemoryRegistrationStore
from main import create_app


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast, isolated tests of pure functions")
    config.addinivalue_line("markers", "integration: tests that go through the HTTP app")


@pytest.fixture
def settings():
    return Settings(STAGE="dev", STORE_BACKEND="memory", _env_file=None)


@pytest.fixture
def store():
    return InMemoryRegistrationStore()


@pytest.fixture
def app(settings, store):
    return create_app(settings, store=store)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def valid_body():
    return {
        "firstName": "Ann",
        "lastName": "Lee",
        "email": "ann@example.com",
        "phone": None,
        "ticketType": "vip",
        "quantity": 2,
        "newsletter": False,
    }
