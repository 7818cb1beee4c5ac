from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from townsquare.api.deps import get_current_user
from townsquare.db.session import get_db
from townsquare.models.user import User
from townsquare.schemas.auth import GenericMessageResponse
from townsquare.schemas.post import PostListResponse
from townsquare.schemas.user import (
    FollowCountsResponse,
    FollowStatusResponse,
    UpdateMeRequest,
    UserListResponse,
    UserProfile,
    UserPublic,
)
from townsquare.services.feed_service import FeedService
from townsquare.services.social_service import SocialService
from townsquare.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserPublic)
def get_me(current_user: User = Depends(get_current_user)):
    return UserPublic.model_validate(current_user)


@router.patch("/me", response_model=UserPublic)
def update_me(
    payload: UpdateMeRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user = UserService(db).update_me(current_user, payload)
    return UserPublic.model_validate(user)


@router.get("/by-handle/{handle}", response_model=UserProfile)
def get_user_by_handle(handle: str, db: Session = Depends(get_db)):
    return UserProfile.model_validate(UserService(db).get_user_by_handle(handle))


@router.get("/{user_id}", response_model=UserProfile)
def get_user(user_id: UUID, db: Session = Depends(get_db)):
    return UserProfile.model_validate(UserService(db).get_user(user_id))


@router.get("/{user_id}/posts", response_model=PostListResponse)
def list_user_posts(
    user_id: UUID,
    page: int = Query(default=1, ge=1),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return FeedService(db).list_user_posts(user=current_user, target_user_id=user_id, page=page)


@router.post("/{user_id}/follow", response_model=GenericMessageResponse)
def follow_user(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return SocialService(db).follow_user(user=current_user, target_user_id=user_id)


@router.delete("/{user_id}/follow", response_model=GenericMessageResponse)
def unfollow_user(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return SocialService(db).unfollow_user(user=current_user, target_user_id=user_id)


@router.get("/{user_id}/follow-counts", response_model=FollowCountsResponse)
def get_follow_counts(user_id: UUID, db: Session = Depends(get_db)):
    return SocialService(db).get_follow_counts(user_id=user_id)


@router.get("/{user_id}/followers", response_model=UserListResponse)
def list_followers(user_id: UUID, db: Session = Depends(get_db)):
    return SocialService(db).list_followers(user_id=user_id)


@router.get("/{user_id}/following", response_model=UserListResponse)
def list_following(user_id: UUID, db: Session = Depends(get_db)):
    return SocialService(db).list_following(user_id=user_id)


@router.get("/{user_id}/follows/{target_id}", response_model=FollowStatusResponse)
def get_follow_status(user_id: UUID, target_id: UUID, db: Session = Depends(get_db)):
    return SocialService(db).get_follow_status(follower_id=user_id, target_id=target_id)
