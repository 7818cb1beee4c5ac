from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from fastapi import HTTPException

from townsquare.services.feed_service import FeedService


def _build_service() -> FeedService:
    service = FeedService.__new__(FeedService)
    service.db = MagicMock()
    service.post_repo = MagicMock()
    service.user_repo = MagicMock()
    service.post_repo.list_recent.return_value = []
    service.post_repo.get_interaction_stats.return_value = {}
    return service


def _post(**overrides) -> SimpleNamespace:
    now = datetime.now(timezone.utc)
    values = {
        "id": uuid4(),
        "text": "Just launched our new product!",
        "images_json": None,
        "author": SimpleNamespace(id=uuid4(), handle="janesmith", username="Jane Smith", profile_image=None),
        "community_id": None,
        "impressions": None,
        "created_at": now,
        "updated_at": now,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


def test_list_for_you_falls_back_to_all_posts_without_memberships() -> None:
    service = _build_service()
    service.db.scalars.return_value = []
    user = SimpleNamespace(id=uuid4())

    response = service.list_for_you(user=user, page=2)

    service.post_repo.list_recent.assert_called_once_with(offset=10, limit=10, community_ids=None)
    assert response.items == []
    assert response.page == 2
    assert response.page_size == 10


def test_list_for_you_filters_by_joined_communities() -> None:
    service = _build_service()
    community_id = uuid4()
    service.db.scalars.return_value = [community_id]

    service.list_for_you(user=SimpleNamespace(id=uuid4()), page=1)

    service.post_repo.list_recent.assert_called_once_with(offset=0, limit=10, community_ids=[community_id])


def test_list_following_filters_by_followed_authors() -> None:
    service = _build_service()
    followed = [uuid4(), uuid4()]
    service.db.scalars.return_value = followed

    service.list_following(user=SimpleNamespace(id=uuid4()), page=1)

    service.post_repo.list_recent.assert_called_once_with(offset=0, limit=10, author_ids=followed)


def test_list_community_rejects_unknown_community() -> None:
    service = _build_service()
    service.db.scalar.return_value = None

    with pytest.raises(HTTPException) as exc:
        service.list_community(user=SimpleNamespace(id=uuid4()), community_id=uuid4(), page=1)

    assert exc.value.status_code == 404
    assert exc.value.detail == "Community not found"
    service.post_repo.list_recent.assert_not_called()


def test_list_user_posts_rejects_unknown_user() -> None:
    service = _build_service()
    service.user_repo.get_by_id.return_value = None

    with pytest.raises(HTTPException) as exc:
        service.list_user_posts(user=SimpleNamespace(id=uuid4()), target_user_id=uuid4(), page=1)

    assert exc.value.status_code == 404


def test_build_page_attaches_viewer_stats_and_clamps_page() -> None:
    service = _build_service()
    liked_post = _post()
    plain_post = _post(images_json=["https://picsum.photos/seed/bali/800/600"], impressions=7)
    service.post_repo.get_interaction_stats.return_value = {
        liked_post.id: {"like_count": 3, "comment_count": 1, "liked": True, "bookmarked": False},
    }
    viewer = SimpleNamespace(id=uuid4())

    response = service._build_page(user=viewer, posts=[liked_post, plain_post], page=0, page_size=10)

    service.post_repo.get_interaction_stats.assert_called_once_with(
        [liked_post.id, plain_post.id],
        viewer_id=viewer.id,
    )
    assert response.page == 1
    first, second = response.items
    assert (first.like_count, first.comment_count, first.liked, first.bookmarked) == (3, 1, True, False)
    assert first.images == []
    assert first.impressions == 0
    assert (second.like_count, second.liked) == (0, False)
    assert second.images == ["https://picsum.photos/seed/bali/800/600"]
    assert second.impressions == 7
    assert second.author.handle == "janesmith"
