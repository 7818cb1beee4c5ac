from types import SimpleNamespace
from unittest.mock import MagicMock
from uuid import uuid4

from fastapi.testclient import TestClient

from townsquare.api.deps import get_current_user
from townsquare.db.session import get_db
from townsquare.main import app
from townsquare.schemas.post import PostListResponse
from townsquare.services.feed_service import FeedService


def test_health() -> None:
    client = TestClient(app)

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_feed_requires_bearer_token() -> None:
    client = TestClient(app)

    response = client.get("/api/posts/for-you")

    assert response.status_code == 401


def test_for_you_feed_passes_page_and_returns_page_envelope(monkeypatch) -> None:
    viewer = SimpleNamespace(id=uuid4())
    calls = []

    def fake_list_for_you(self, *, user, page):
        calls.append((user, page))
        return PostListResponse(items=[], page=page, page_size=10)

    monkeypatch.setattr(FeedService, "list_for_you", fake_list_for_you)
    app.dependency_overrides[get_current_user] = lambda: viewer
    app.dependency_overrides[get_db] = lambda: MagicMock()
    try:
        response = TestClient(app).get("/api/posts/for-you", params={"page": 3})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.json() == {"items": [], "page": 3, "page_size": 10}
    assert calls == [(viewer, 3)]
