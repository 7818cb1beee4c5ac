from types import SimpleNamespace
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from fastapi import HTTPException

from townsquare.services.social_service import SocialService


def _build_service() -> SocialService:
    service = SocialService.__new__(SocialService)
    service.db = MagicMock()
    return service


def test_follow_user_rejects_self_follow() -> None:
    service = _build_service()
    user = SimpleNamespace(id=uuid4())

    with pytest.raises(HTTPException) as exc:
        service.follow_user(user=user, target_user_id=user.id)

    assert exc.value.status_code == 400
    assert exc.value.detail == "Cannot follow yourself"
    service.db.scalar.assert_not_called()


def test_follow_user_is_idempotent_when_already_following() -> None:
    service = _build_service()
    user = SimpleNamespace(id=uuid4())
    target = SimpleNamespace(id=uuid4())
    service.db.scalar.side_effect = [target, SimpleNamespace(id=uuid4())]

    response = service.follow_user(user=user, target_user_id=target.id)

    assert response.message == "Already following"
    service.db.add.assert_not_called()
    service.db.commit.assert_not_called()


def test_follow_user_creates_follow() -> None:
    service = _build_service()
    user = SimpleNamespace(id=uuid4())
    target = SimpleNamespace(id=uuid4())
    service.db.scalar.side_effect = [target, None]

    response = service.follow_user(user=user, target_user_id=target.id)

    assert response.message == "Followed"
    follow = service.db.add.call_args.args[0]
    assert follow.follower_id == user.id
    assert follow.following_id == target.id
    service.db.commit.assert_called_once()


def test_follow_user_rejects_missing_target() -> None:
    service = _build_service()
    service.db.scalar.side_effect = [None]

    with pytest.raises(HTTPException) as exc:
        service.follow_user(user=SimpleNamespace(id=uuid4()), target_user_id=uuid4())

    assert exc.value.status_code == 404
    assert exc.value.detail == "User not found"


def test_unfollow_user_rejects_self() -> None:
    service = _build_service()
    user = SimpleNamespace(id=uuid4())

    with pytest.raises(HTTPException) as exc:
        service.unfollow_user(user=user, target_user_id=user.id)

    assert exc.value.status_code == 400
    service.db.execute.assert_not_called()


def test_get_follow_counts_returns_both_directions() -> None:
    service = _build_service()
    target = SimpleNamespace(id=uuid4())
    service.db.scalar.side_effect = [target, 3, None]

    counts = service.get_follow_counts(user_id=target.id)

    assert counts.user_id == target.id
    assert counts.followers == 3
    assert counts.following == 0


def test_get_follow_status_reports_existing_follow() -> None:
    service = _build_service()
    service.db.scalar.return_value = uuid4()

    result = service.get_follow_status(follower_id=uuid4(), target_id=uuid4())

    assert result.following is True


def test_like_post_is_idempotent() -> None:
    service = _build_service()
    post = SimpleNamespace(id=uuid4())
    service.db.scalar.side_effect = [post, SimpleNamespace(id=uuid4())]

    response = service.like_post(user=SimpleNamespace(id=uuid4()), post_id=post.id)

    assert response.message == "Post already liked"
    service.db.add.assert_not_called()


def test_like_post_rejects_missing_post() -> None:
    service = _build_service()
    service.db.scalar.side_effect = [None]

    with pytest.raises(HTTPException) as exc:
        service.like_post(user=SimpleNamespace(id=uuid4()), post_id=uuid4())

    assert exc.value.status_code == 404
    assert exc.value.detail == "Post not found"


def test_unlike_post_without_like_returns_404() -> None:
    service = _build_service()
    service.db.scalar.return_value = None

    with pytest.raises(HTTPException) as exc:
        service.unlike_post(user=SimpleNamespace(id=uuid4()), post_id=uuid4())

    assert exc.value.status_code == 404
    assert exc.value.detail == "Like not found"


def test_unlike_post_deletes_existing_like() -> None:
    service = _build_service()
    like = SimpleNamespace(id=uuid4())
    service.db.scalar.return_value = like

    response = service.unlike_post(user=SimpleNamespace(id=uuid4()), post_id=uuid4())

    assert response.message == "Unliked"
    service.db.delete.assert_called_once_with(like)


def test_bookmark_post_creates_bookmark() -> None:
    service = _build_service()
    user = SimpleNamespace(id=uuid4())
    post = SimpleNamespace(id=uuid4())
    service.db.scalar.side_effect = [post, None]

    response = service.bookmark_post(user=user, post_id=post.id)

    assert response.message == "Bookmarked"
    bookmark = service.db.add.call_args.args[0]
    assert (bookmark.post_id, bookmark.user_id) == (post.id, user.id)
