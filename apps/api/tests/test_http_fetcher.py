import asyncio

import httpx
import pytest

from townsquare.client.errors import FetchError
from townsquare.client.feed_aggregator import FeedAggregator
from townsquare.client.http_fetcher import HttpFeedClient
from townsquare.client.models import CurrentUser

USER = CurrentUser(id="u1", handle="janesmith", access_token="secret-token")


def _client(handler) -> HttpFeedClient:
    transport = httpx.MockTransport(handler)
    return HttpFeedClient(
        current_user=USER,
        base_url="http://feed.test/api/",
        client=httpx.AsyncClient(transport=transport),
    )


def test_path_for_view_maps_feeds_and_communities() -> None:
    assert HttpFeedClient.path_for_view("for-you") == "/posts/for-you"
    assert HttpFeedClient.path_for_view("following") == "/posts/following"
    assert HttpFeedClient.path_for_view("c 1/x") == "/communities/c%201%2Fx/posts"


def test_fetch_page_sends_bearer_token_and_page_param() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={"items": [{"id": "p1", "text": "hello"}, {"id": "p2", "text": "world"}], "page": 2, "page_size": 10},
        )

    client = _client(handler)
    items = asyncio.run(client.fetch_page("following", 2))

    assert [item.id for item in items] == ["p1", "p2"]
    assert items[0].text == "hello"
    assert seen[0].url.path == "/api/posts/following"
    assert seen[0].url.params["page"] == "2"
    assert seen[0].headers["Authorization"] == "Bearer secret-token"


def test_fetch_page_accepts_bare_list_payload() -> None:
    client = _client(lambda request: httpx.Response(200, json=[{"id": "c1"}]))

    items = asyncio.run(client.fetch_page("community-1", 1))

    assert [item.id for item in items] == ["c1"]


def test_fetch_page_error_status_becomes_fetch_error() -> None:
    client = _client(lambda request: httpx.Response(500, json={"detail": "boom"}))

    with pytest.raises(FetchError) as exc:
        asyncio.run(client.fetch_page("for-you", 1))

    assert exc.value.status_code == 500
    assert "HTTP 500" in str(exc.value)


def test_fetch_page_transport_error_becomes_fetch_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)

    with pytest.raises(FetchError) as exc:
        asyncio.run(client.fetch_page("for-you", 1))

    assert exc.value.status_code is None
    assert "ConnectError" in str(exc.value)


def test_fetch_page_malformed_body_becomes_fetch_error() -> None:
    client = _client(lambda request: httpx.Response(200, content=b"<html>"))

    with pytest.raises(FetchError):
        asyncio.run(client.fetch_page("for-you", 1))


def test_fetch_page_item_without_id_becomes_fetch_error() -> None:
    client = _client(lambda request: httpx.Response(200, json={"items": [{"text": "no id"}]}))

    with pytest.raises(FetchError) as exc:
        asyncio.run(client.fetch_page("for-you", 1))

    assert str(exc.value) == "Malformed feed item"


def test_list_user_communities_parses_tabs() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/communities/user"
        return httpx.Response(
            200,
            json={"communities": [{"id": "c1", "name": "Tech Enthusiasts", "description": None}]},
        )

    client = _client(handler)
    communities = asyncio.run(client.list_user_communities())

    assert [(community.id, community.name) for community in communities] == [("c1", "Tech Enthusiasts")]


def test_aggregator_user_switch_moves_requests_to_new_token() -> None:
    alice = CurrentUser(id="u-alice", handle="alice", access_token="alice-token")
    bob = CurrentUser(id="u-bob", handle="bob", access_token="bob-token")
    tokens: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        tokens.append(request.headers["Authorization"])
        if request.url.path.endswith("/communities/user"):
            return httpx.Response(200, json={"communities": []})
        owner = request.headers["Authorization"].removeprefix("Bearer ").removesuffix("-token")
        return httpx.Response(200, json={"items": [{"id": f"{owner}-post"}], "page": 1, "page_size": 10})

    fetcher = HttpFeedClient(
        current_user=alice,
        base_url="http://feed.test/api",
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    aggregator = FeedAggregator(fetcher, current_user=alice, page_size=10)

    async def scenario() -> None:
        await aggregator.mount()
        await aggregator.set_current_user(bob)
        await aggregator.load_communities()

    asyncio.run(scenario())

    assert tokens == ["Bearer alice-token", "Bearer bob-token", "Bearer bob-token"]
    assert [item.id for item in aggregator.items] == ["bob-post"]


def test_signed_out_client_fails_without_sending_request() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[])

    client = _client(handler)
    client.set_current_user(None)

    with pytest.raises(FetchError) as exc:
        asyncio.run(client.fetch_page("for-you", 1))

    assert str(exc.value) == "Sign in to load posts"
    assert seen == []


def test_list_user_communities_error_names_communities() -> None:
    client = _client(lambda request: httpx.Response(503))

    with pytest.raises(FetchError) as exc:
        asyncio.run(client.list_user_communities())

    assert str(exc.value) == "Failed to fetch communities (HTTP 503)"
    assert exc.value.status_code == 503
