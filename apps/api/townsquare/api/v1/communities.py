from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from townsquare.api.deps import get_current_user
from townsquare.db.session import get_db
from townsquare.models.user import User
from townsquare.schemas.auth import GenericMessageResponse
from townsquare.schemas.community import CommunityListResponse
from townsquare.schemas.post import PostListResponse
from townsquare.services.community_service import CommunityService
from townsquare.services.feed_service import FeedService

router = APIRouter(prefix="/communities", tags=["communities"])


@router.get("/user", response_model=CommunityListResponse)
def list_user_communities(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return CommunityService(db).list_user_communities(user=current_user)


@router.get("/{community_id}/posts", response_model=PostListResponse)
def list_community_posts(
    community_id: UUID,
    page: int = Query(default=1, ge=1),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return FeedService(db).list_community(user=current_user, community_id=community_id, page=page)


@router.post("/{community_id}/membership", response_model=GenericMessageResponse)
def join_community(
    community_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return CommunityService(db).join(user=current_user, community_id=community_id)


@router.delete("/{community_id}/membership", response_model=GenericMessageResponse)
def leave_community(
    community_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return CommunityService(db).leave(user=current_user, community_id=community_id)
