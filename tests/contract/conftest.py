"""Fixtures for admin API contract tests."""

import pytest
from fastapi.testclient import TestClient

from src.api.app import create_app
from src.services import get_db
from src.services.notification_service import NotificationCenter


@pytest.fixture
def notifications() -> NotificationCenter:
    return NotificationCenter(ttl_seconds=60)


@pytest.fixture
def app(backend_client, notifications, db_session):
    app = create_app(backend_client=backend_client, notifications=notifications)
    app.dependency_overrides[get_db] = lambda: db_session
    return app


@pytest.fixture
def client(app) -> TestClient:
    """Create FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def toasts(notifications: NotificationCenter):
    """Active notifications as (type, message) pairs."""

    def _toasts() -> list[tuple[str, str]]:
        return [(n.type.value, n.message) for n in notifications.active()]

    return _toasts
