import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from townsquare.models.post import Post
from townsquare.models.post_bookmark import PostBookmark
from townsquare.models.post_like import PostLike
from townsquare.models.user import User
from townsquare.models.user_follow import UserFollow
from townsquare.schemas.auth import GenericMessageResponse
from townsquare.schemas.user import (
    FollowCountsResponse,
    FollowStatusResponse,
    UserListResponse,
    UserSummary,
)

logger = logging.getLogger(__name__)


class SocialService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def follow_user(self, *, user: User, target_user_id: UUID) -> GenericMessageResponse:
        if target_user_id == user.id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot follow yourself")

        target = self._get_active_user(target_user_id)

        exists = self.db.scalar(
            select(UserFollow).where(
                UserFollow.follower_id == user.id,
                UserFollow.following_id == target.id,
            )
        )
        if exists:
            return GenericMessageResponse(message="Already following")

        self.db.add(UserFollow(follower_id=user.id, following_id=target.id))
        self.db.commit()
        logger.debug("follow created", extra={"follower": str(user.id), "following": str(target.id)})
        return GenericMessageResponse(message="Followed")

    def unfollow_user(self, *, user: User, target_user_id: UUID) -> GenericMessageResponse:
        if target_user_id == user.id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot unfollow yourself")

        stmt = delete(UserFollow).where(
            UserFollow.follower_id == user.id,
            UserFollow.following_id == target_user_id,
        )
        self.db.execute(stmt)
        self.db.commit()
        return GenericMessageResponse(message="Unfollowed")

    def get_follow_counts(self, *, user_id: UUID) -> FollowCountsResponse:
        target = self._get_active_user(user_id)
        followers = self.db.scalar(
            select(func.count(UserFollow.id)).where(UserFollow.following_id == target.id)
        )
        following = self.db.scalar(
            select(func.count(UserFollow.id)).where(UserFollow.follower_id == target.id)
        )
        return FollowCountsResponse(user_id=target.id, followers=int(followers or 0), following=int(following or 0))

    def list_followers(self, *, user_id: UUID) -> UserListResponse:
        target = self._get_active_user(user_id)
        stmt = (
            select(User)
            .join(UserFollow, UserFollow.follower_id == User.id)
            .where(UserFollow.following_id == target.id, User.is_deleted.is_(False))
            .order_by(UserFollow.created_at.desc())
        )
        return UserListResponse(users=[UserSummary.model_validate(row) for row in self.db.scalars(stmt)])

    def list_following(self, *, user_id: UUID) -> UserListResponse:
        target = self._get_active_user(user_id)
        stmt = (
            select(User)
            .join(UserFollow, UserFollow.following_id == User.id)
            .where(UserFollow.follower_id == target.id, User.is_deleted.is_(False))
            .order_by(UserFollow.created_at.desc())
        )
        return UserListResponse(users=[UserSummary.model_validate(row) for row in self.db.scalars(stmt)])

    def get_follow_status(self, *, follower_id: UUID, target_id: UUID) -> FollowStatusResponse:
        exists = self.db.scalar(
            select(UserFollow.id).where(
                UserFollow.follower_id == follower_id,
                UserFollow.following_id == target_id,
            )
        )
        return FollowStatusResponse(follower_id=follower_id, target_id=target_id, following=exists is not None)

    def like_post(self, *, user: User, post_id: UUID) -> GenericMessageResponse:
        post = self._get_post(post_id)
        exists = self.db.scalar(select(PostLike).where(PostLike.post_id == post.id, PostLike.user_id == user.id))
        if exists:
            return GenericMessageResponse(message="Post already liked")

        self.db.add(PostLike(post_id=post.id, user_id=user.id))
        self.db.commit()
        return GenericMessageResponse(message="Liked")

    def unlike_post(self, *, user: User, post_id: UUID) -> GenericMessageResponse:
        exists = self.db.scalar(select(PostLike).where(PostLike.post_id == post_id, PostLike.user_id == user.id))
        if not exists:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Like not found")

        self.db.delete(exists)
        self.db.commit()
        return GenericMessageResponse(message="Unliked")

    def bookmark_post(self, *, user: User, post_id: UUID) -> GenericMessageResponse:
        post = self._get_post(post_id)
        exists = self.db.scalar(
            select(PostBookmark).where(PostBookmark.post_id == post.id, PostBookmark.user_id == user.id)
        )
        if exists:
            return GenericMessageResponse(message="Post already bookmarked")

        self.db.add(PostBookmark(post_id=post.id, user_id=user.id))
        self.db.commit()
        return GenericMessageResponse(message="Bookmarked")

    def unbookmark_post(self, *, user: User, post_id: UUID) -> GenericMessageResponse:
        stmt = delete(PostBookmark).where(PostBookmark.post_id == post_id, PostBookmark.user_id == user.id)
        self.db.execute(stmt)
        self.db.commit()
        return GenericMessageResponse(message="Bookmark removed")

    def _get_active_user(self, user_id: UUID) -> User:
        target = self.db.scalar(select(User).where(User.id == user_id, User.is_deleted.is_(False)))
        if not target:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        return target

    def _get_post(self, post_id: UUID) -> Post:
        post = self.db.scalar(
            select(Post)
            .join(User, User.id == Post.author_id)
            .where(Post.id == post_id, User.is_deleted.is_(False))
        )
        if not post:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
        return post
