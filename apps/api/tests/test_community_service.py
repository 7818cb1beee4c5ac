from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from fastapi import HTTPException

from townsquare.services.community_service import CommunityService


def _build_service() -> CommunityService:
    service = CommunityService.__new__(CommunityService)
    service.db = MagicMock()
    return service


def test_join_rejects_unknown_community() -> None:
    service = _build_service()
    service.db.scalar.side_effect = [None]

    with pytest.raises(HTTPException) as exc:
        service.join(user=SimpleNamespace(id=uuid4()), community_id=uuid4())

    assert exc.value.status_code == 404


def test_join_twice_is_a_no_op() -> None:
    service = _build_service()
    community = SimpleNamespace(id=uuid4())
    service.db.scalar.side_effect = [community, SimpleNamespace(id=uuid4())]

    response = service.join(user=SimpleNamespace(id=uuid4()), community_id=community.id)

    assert response.message == "Already a member"
    service.db.add.assert_not_called()


def test_join_adds_member_role() -> None:
    service = _build_service()
    user = SimpleNamespace(id=uuid4())
    community = SimpleNamespace(id=uuid4())
    service.db.scalar.side_effect = [community, None]

    response = service.join(user=user, community_id=community.id)

    assert response.message == "Joined"
    membership = service.db.add.call_args.args[0]
    assert (membership.user_id, membership.community_id) == (user.id, community.id)


def test_list_user_communities_maps_rows() -> None:
    service = _build_service()
    service.db.scalars.return_value = [
        SimpleNamespace(
            id=uuid4(),
            name="Tech Enthusiasts",
            description=None,
            image=None,
            created_at=datetime.now(timezone.utc),
        ),
    ]

    response = service.list_user_communities(user=SimpleNamespace(id=uuid4()))

    assert [community.name for community in response.communities] == ["Tech Enthusiasts"]
