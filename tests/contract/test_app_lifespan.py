"""Application factory and lifespan."""

from fastapi.testclient import TestClient

from src.api.app import create_app
from src.services.backend_client import BackendClient
from src.services.config import Settings
from src.services.notification_service import NotificationCenter


def test_lifespan_creates_and_closes_owned_client():
    settings = Settings(_env_file=None, backend_url="http://backend.test", notification_ttl_seconds=3)
    app = create_app(settings=settings)

    with TestClient(app) as client:
        assert client.get("/health").json() == {"status": "ok"}
        assert isinstance(app.state.backend_client, BackendClient)
        assert isinstance(app.state.notifications, NotificationCenter)
        assert app.state.notifications.ttl_seconds == 3

    assert app.state.backend_client is None


def test_lifespan_keeps_injected_client(backend_client, notifications):
    app = create_app(backend_client=backend_client, notifications=notifications)

    with TestClient(app):
        pass

    assert app.state.backend_client is backend_client
    assert app.state.notifications is notifications


def test_openapi_lists_admin_routes():
    app = create_app(settings=Settings(_env_file=None))

    paths = app.openapi()["paths"]

    assert "/api/admin/slips/generation" in paths
    assert "/api/admin/gas/{year}/{month}/{unit_id}" in paths
    assert app.title == "Matisse Admin"
