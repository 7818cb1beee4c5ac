from __future__ import annotations

import uuid

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from townsquare.core.pagination import page_window
from townsquare.models.community import Community, CommunityMembership
from townsquare.models.post import Post
from townsquare.models.user import User
from townsquare.models.user_follow import UserFollow
from townsquare.repositories.post_repo import PostRepository
from townsquare.repositories.user_repo import UserRepository
from townsquare.schemas.post import PostItem, PostListResponse
from townsquare.schemas.user import UserSummary


class FeedService:
    """Page-based post listings for every feed view.

    Every listing is newest first and returns at most ``feed_page_size`` items.
    A page shorter than that is the only end-of-feed signal clients get.
    """

    def __init__(self, db: Session) -> None:
        self.db = db
        self.post_repo = PostRepository(db)
        self.user_repo = UserRepository(db)

    def list_all(self, *, user: User, page: int) -> PostListResponse:
        offset, limit = page_window(page)
        posts = self.post_repo.list_recent(offset=offset, limit=limit)
        return self._build_page(user=user, posts=posts, page=page, page_size=limit)

    def list_for_you(self, *, user: User, page: int) -> PostListResponse:
        offset, limit = page_window(page)
        community_ids = self._load_membership_ids(user.id)
        posts = self.post_repo.list_recent(
            offset=offset,
            limit=limit,
            community_ids=community_ids or None,
        )
        return self._build_page(user=user, posts=posts, page=page, page_size=limit)

    def list_following(self, *, user: User, page: int) -> PostListResponse:
        offset, limit = page_window(page)
        followed_ids = self._load_following_ids(user.id)
        posts = self.post_repo.list_recent(offset=offset, limit=limit, author_ids=followed_ids)
        return self._build_page(user=user, posts=posts, page=page, page_size=limit)

    def list_community(self, *, user: User, community_id: uuid.UUID, page: int) -> PostListResponse:
        community = self.db.scalar(select(Community).where(Community.id == community_id))
        if not community:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Community not found")

        offset, limit = page_window(page)
        posts = self.post_repo.list_recent(offset=offset, limit=limit, community_ids=[community.id])
        return self._build_page(user=user, posts=posts, page=page, page_size=limit)

    def list_user_posts(self, *, user: User, target_user_id: uuid.UUID, page: int) -> PostListResponse:
        target = self.user_repo.get_by_id(target_user_id)
        if not target:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

        offset, limit = page_window(page)
        posts = self.post_repo.list_recent(offset=offset, limit=limit, author_ids=[target.id])
        return self._build_page(user=user, posts=posts, page=page, page_size=limit)

    def list_bookmarks(self, *, user: User, page: int) -> PostListResponse:
        offset, limit = page_window(page)
        posts = self.post_repo.list_bookmarked(user_id=user.id, offset=offset, limit=limit)
        return self._build_page(user=user, posts=posts, page=page, page_size=limit)

    def build_item(self, *, user: User, post: Post) -> PostItem:
        stats = self.post_repo.get_interaction_stats([post.id], viewer_id=user.id)
        return self._to_item(post, stats.get(post.id))

    def _build_page(self, *, user: User, posts: list[Post], page: int, page_size: int) -> PostListResponse:
        stats = self.post_repo.get_interaction_stats([post.id for post in posts], viewer_id=user.id)
        items = [self._to_item(post, stats.get(post.id)) for post in posts]
        return PostListResponse(items=items, page=max(page, 1), page_size=page_size)

    def _to_item(self, post: Post, stats: dict | None) -> PostItem:
        stats = stats or {}
        return PostItem(
            id=post.id,
            text=post.text,
            images=list(post.images_json or []),
            author=UserSummary.model_validate(post.author),
            community_id=post.community_id,
            impressions=post.impressions or 0,
            like_count=int(stats.get("like_count", 0)),
            comment_count=int(stats.get("comment_count", 0)),
            liked=bool(stats.get("liked", False)),
            bookmarked=bool(stats.get("bookmarked", False)),
            created_at=post.created_at,
            updated_at=post.updated_at,
        )

    def _load_membership_ids(self, user_id: uuid.UUID) -> list[uuid.UUID]:
        stmt = select(CommunityMembership.community_id).where(CommunityMembership.user_id == user_id)
        return list(self.db.scalars(stmt))

    def _load_following_ids(self, user_id: uuid.UUID) -> list[uuid.UUID]:
        stmt = select(UserFollow.following_id).where(UserFollow.follower_id == user_id)
        return list(self.db.scalars(stmt))
