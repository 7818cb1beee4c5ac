from types import SimpleNamespace
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from fastapi import HTTPException

from townsquare.schemas.post import CreateCommentRequest, CreatePostRequest
from townsquare.services.post_service import PostService


def _build_service() -> PostService:
    service = PostService.__new__(PostService)
    service.db = MagicMock()
    service.post_repo = MagicMock()
    return service


def _user() -> SimpleNamespace:
    return SimpleNamespace(id=uuid4(), handle="janesmith")


def test_create_post_rejects_blank_text() -> None:
    service = _build_service()

    with pytest.raises(HTTPException) as exc:
        service.create_post(user=_user(), payload=CreatePostRequest(text="   "))

    assert exc.value.status_code == 400
    assert exc.value.detail == "Post text cannot be empty"
    service.post_repo.create.assert_not_called()


def test_create_post_rejects_too_many_images() -> None:
    service = _build_service()
    payload = CreatePostRequest(
        text="Sunset photos",
        images=[f"https://picsum.photos/seed/{index}/800/600" for index in range(5)],
    )

    with pytest.raises(HTTPException) as exc:
        service.create_post(user=_user(), payload=payload)

    assert exc.value.status_code == 400
    assert exc.value.detail == "Too many images"


def test_create_post_requires_community_membership() -> None:
    service = _build_service()
    community = SimpleNamespace(id=uuid4())
    service.db.scalar.side_effect = [community, None]

    with pytest.raises(HTTPException) as exc:
        service.create_post(user=_user(), payload=CreatePostRequest(text="hello", community_id=community.id))

    assert exc.value.status_code == 403
    assert exc.value.detail == "Join the community before posting in it"
    service.post_repo.create.assert_not_called()


def test_create_post_rejects_unknown_community() -> None:
    service = _build_service()
    service.db.scalar.side_effect = [None]

    with pytest.raises(HTTPException) as exc:
        service.create_post(user=_user(), payload=CreatePostRequest(text="hello", community_id=uuid4()))

    assert exc.value.status_code == 404
    assert exc.value.detail == "Community not found"


def test_get_post_rejects_missing_post() -> None:
    service = _build_service()
    service.post_repo.get_by_id.return_value = None

    with pytest.raises(HTTPException) as exc:
        service.get_post(user=_user(), post_id=uuid4())

    assert exc.value.status_code == 404
    service.post_repo.increment_impressions.assert_not_called()


def test_delete_post_only_allows_author() -> None:
    service = _build_service()
    service.post_repo.get_by_id.return_value = SimpleNamespace(id=uuid4(), author_id=uuid4())

    with pytest.raises(HTTPException) as exc:
        service.delete_post(user=_user(), post_id=uuid4())

    assert exc.value.status_code == 403
    service.post_repo.delete.assert_not_called()


def test_delete_post_removes_own_post() -> None:
    service = _build_service()
    user = _user()
    post = SimpleNamespace(id=uuid4(), author_id=user.id)
    service.post_repo.get_by_id.return_value = post

    response = service.delete_post(user=user, post_id=post.id)

    assert response.message == "Post deleted"
    service.post_repo.delete.assert_called_once_with(post)
    service.db.commit.assert_called_once()


def test_add_comment_rejects_blank_text() -> None:
    service = _build_service()

    with pytest.raises(HTTPException) as exc:
        service.add_comment(user=_user(), post_id=uuid4(), payload=CreateCommentRequest(text="  "))

    assert exc.value.status_code == 400
    assert exc.value.detail == "Comment cannot be empty"
    service.post_repo.get_by_id.assert_not_called()
