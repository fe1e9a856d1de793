"""Pytest configuration: in-memory draft store and a fake REST backend."""

import json
import os

# Set test settings BEFORE any imports from src
# The engine in src.services is created from DATABASE_URL at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BACKEND_URL"] = "http://backend.test"
os.environ["BACKEND_TOKEN"] = "test-token"
os.environ["LOG_FILE"] = "logs/test.log"

import httpx
import pytest
from sqlalchemy.orm import sessionmaker

from src.models import Base
from src.services import create_db_engine, init_db
from src.services.backend_client import BackendClient
from src.services.config import TokenStore

BACKEND_URL = "http://backend.test"


class FakeBackend:
    """Scripted REST backend served through httpx.MockTransport.

    Responses are queued per (method, path); the last queued response of a
    route is repeated. Unknown routes answer 404.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], list[tuple[int, object, str | None]]] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, status_code: int = 200, json_body=None, text=None):
        self.routes.setdefault((method.upper(), path), []).append((status_code, json_body, text))
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"message": f"No route for {request.method} {request.url.path}"})
        status_code, json_body, text = queue.pop(0) if len(queue) > 1 else queue[0]
        if text is not None:
            return httpx.Response(status_code, text=text)
        if json_body is None:
            return httpx.Response(status_code)
        return httpx.Response(status_code, json=json_body)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method.upper() and r.url.path == path]

    def body(self, method: str, path: str, index: int = -1):
        """Decoded JSON body of a recorded request (the last one by default)."""
        return json.loads(self.calls(method, path)[index].content)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def backend_client(backend: FakeBackend) -> BackendClient:
    return BackendClient(
        base_url=BACKEND_URL,
        token_store=TokenStore(token="test-token"),
        transport=backend.transport(),
    )


@pytest.fixture
def db_session():
    """Fresh in-memory draft store per test."""
    engine = create_db_engine("sqlite://")
    init_db(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()
