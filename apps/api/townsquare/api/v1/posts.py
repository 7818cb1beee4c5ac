from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from townsquare.api.deps import get_current_user
from townsquare.db.session import get_db
from townsquare.models.user import User
from townsquare.schemas.auth import GenericMessageResponse
from townsquare.schemas.post import (
    CommentItem,
    CommentListResponse,
    CreateCommentRequest,
    CreatePostRequest,
    PostItem,
    PostListResponse,
)
from townsquare.services.feed_service import FeedService
from townsquare.services.post_service import PostService
from townsquare.services.social_service import SocialService

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("", response_model=PostListResponse)
def list_posts(
    page: int = Query(default=1, ge=1),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return FeedService(db).list_all(user=current_user, page=page)


@router.post("", response_model=PostItem, status_code=status.HTTP_201_CREATED)
def create_post(
    payload: CreatePostRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return PostService(db).create_post(user=current_user, payload=payload)


@router.get("/for-you", response_model=PostListResponse)
def list_for_you(
    page: int = Query(default=1, ge=1),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return FeedService(db).list_for_you(user=current_user, page=page)


@router.get("/following", response_model=PostListResponse)
def list_following(
    page: int = Query(default=1, ge=1),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return FeedService(db).list_following(user=current_user, page=page)


@router.get("/{post_id}", response_model=PostItem)
def get_post(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return PostService(db).get_post(user=current_user, post_id=post_id)


@router.delete("/{post_id}", response_model=GenericMessageResponse)
def delete_post(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return PostService(db).delete_post(user=current_user, post_id=post_id)


@router.post("/{post_id}/like", response_model=GenericMessageResponse)
def like_post(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return SocialService(db).like_post(user=current_user, post_id=post_id)


@router.delete("/{post_id}/like", response_model=GenericMessageResponse)
def unlike_post(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return SocialService(db).unlike_post(user=current_user, post_id=post_id)


@router.post("/{post_id}/bookmark", response_model=GenericMessageResponse)
def bookmark_post(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return SocialService(db).bookmark_post(user=current_user, post_id=post_id)


@router.delete("/{post_id}/bookmark", response_model=GenericMessageResponse)
def unbookmark_post(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return SocialService(db).unbookmark_post(user=current_user, post_id=post_id)


@router.get("/{post_id}/comments", response_model=CommentListResponse)
def list_comments(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return PostService(db).list_comments(post_id=post_id)


@router.post("/{post_id}/comments", response_model=CommentItem, status_code=status.HTTP_201_CREATED)
def add_comment(
    post_id: UUID,
    payload: CreateCommentRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return PostService(db).add_comment(user=current_user, post_id=post_id, payload=payload)
