import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from townsquare.core.config import settings
from townsquare.models.community import Community, CommunityMembership
from townsquare.models.post_comment import PostComment
from townsquare.models.user import User
from townsquare.repositories.post_repo import PostRepository
from townsquare.schemas.auth import GenericMessageResponse
from townsquare.schemas.post import (
    CommentItem,
    CommentListResponse,
    CreateCommentRequest,
    CreatePostRequest,
    PostItem,
)
from townsquare.schemas.user import UserSummary
from townsquare.services.feed_service import FeedService

logger = logging.getLogger(__name__)


class PostService:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.post_repo = PostRepository(db)

    def create_post(self, *, user: User, payload: CreatePostRequest) -> PostItem:
        text = payload.text.strip()
        if not text:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Post text cannot be empty")
        if len(text) > settings.post_max_length:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Post text is too long")

        images = [url.strip() for url in payload.images if url and url.strip()]
        if len(images) > settings.post_max_images:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Too many images")

        if payload.community_id is not None:
            self._ensure_member(user_id=user.id, community_id=payload.community_id)

        post = self.post_repo.create(
            author_id=user.id,
            text=text,
            images=images,
            community_id=payload.community_id,
        )
        self.db.commit()
        self.db.refresh(post)

        logger.info("post created", extra={"post_id": str(post.id), "author": user.handle})
        return FeedService(self.db).build_item(user=user, post=post)

    def get_post(self, *, user: User, post_id: UUID) -> PostItem:
        post = self.post_repo.get_by_id(post_id)
        if not post:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")

        self.post_repo.increment_impressions(post.id)
        self.db.commit()
        self.db.refresh(post)
        return FeedService(self.db).build_item(user=user, post=post)

    def delete_post(self, *, user: User, post_id: UUID) -> GenericMessageResponse:
        post = self.post_repo.get_by_id(post_id)
        if not post:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
        if post.author_id != user.id:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only the author can delete this post")

        self.post_repo.delete(post)
        self.db.commit()
        return GenericMessageResponse(message="Post deleted")

    def list_comments(self, *, post_id: UUID) -> CommentListResponse:
        post = self.post_repo.get_by_id(post_id)
        if not post:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")

        stmt = (
            select(PostComment)
            .join(User, PostComment.author_id == User.id)
            .where(PostComment.post_id == post.id, User.is_deleted.is_(False))
            .options(joinedload(PostComment.author))
            .order_by(PostComment.created_at.asc())
        )
        comments = [self._to_comment(comment) for comment in self.db.scalars(stmt)]
        return CommentListResponse(comments=comments)

    def add_comment(self, *, user: User, post_id: UUID, payload: CreateCommentRequest) -> CommentItem:
        text = payload.text.strip()
        if not text:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Comment cannot be empty")
        if len(text) > settings.comment_max_length:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Comment is too long")

        post = self.post_repo.get_by_id(post_id)
        if not post:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")

        comment = PostComment(post_id=post.id, author_id=user.id, text=text)
        self.db.add(comment)
        self.db.commit()
        self.db.refresh(comment)
        comment.author = user
        return self._to_comment(comment)

    def _ensure_member(self, *, user_id: UUID, community_id: UUID) -> None:
        community = self.db.scalar(select(Community).where(Community.id == community_id))
        if not community:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Community not found")

        membership = self.db.scalar(
            select(CommunityMembership).where(
                CommunityMembership.user_id == user_id,
                CommunityMembership.community_id == community_id,
            )
        )
        if not membership:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Join the community before posting in it",
            )

    def _to_comment(self, comment: PostComment) -> CommentItem:
        return CommentItem(
            id=comment.id,
            post_id=comment.post_id,
            author=UserSummary.model_validate(comment.author),
            text=comment.text,
            created_at=comment.created_at,
        )
