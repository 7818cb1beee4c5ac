import uuid

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session, joinedload

from townsquare.models.post import Post
from townsquare.models.post_bookmark import PostBookmark
from townsquare.models.post_comment import PostComment
from townsquare.models.post_like import PostLike
from townsquare.models.user import User


class PostRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def create(
        self,
        *,
        author_id: uuid.UUID,
        text: str,
        images: list[str],
        community_id: uuid.UUID | None,
    ) -> Post:
        post = Post(
            author_id=author_id,
            text=text,
            images_json=images,
            community_id=community_id,
        )
        self.db.add(post)
        self.db.flush()
        return post

    def get_by_id(self, post_id: uuid.UUID) -> Post | None:
        stmt = (
            select(Post)
            .join(User, Post.author_id == User.id)
            .where(Post.id == post_id, User.is_deleted.is_(False))
            .options(joinedload(Post.author))
        )
        return self.db.scalar(stmt)

    def list_recent(
        self,
        *,
        offset: int,
        limit: int,
        author_ids: list[uuid.UUID] | None = None,
        community_ids: list[uuid.UUID] | None = None,
    ) -> list[Post]:
        """Newest posts first; ``None`` filters are ignored, empty lists match nothing."""
        stmt = (
            select(Post)
            .join(User, Post.author_id == User.id)
            .where(User.is_deleted.is_(False))
            .options(joinedload(Post.author))
        )
        if author_ids is not None:
            stmt = stmt.where(Post.author_id.in_(author_ids))
        if community_ids is not None:
            stmt = stmt.where(Post.community_id.in_(community_ids))

        stmt = stmt.order_by(Post.created_at.desc(), Post.id.desc()).offset(offset).limit(limit)
        return list(self.db.scalars(stmt))

    def list_bookmarked(self, *, user_id: uuid.UUID, offset: int, limit: int) -> list[Post]:
        stmt = (
            select(Post)
            .join(PostBookmark, PostBookmark.post_id == Post.id)
            .join(User, Post.author_id == User.id)
            .where(PostBookmark.user_id == user_id, User.is_deleted.is_(False))
            .options(joinedload(Post.author))
            .order_by(PostBookmark.created_at.desc(), Post.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(self.db.scalars(stmt))

    def get_interaction_stats(
        self,
        post_ids: list[uuid.UUID],
        *,
        viewer_id: uuid.UUID,
    ) -> dict[uuid.UUID, dict[str, int | bool]]:
        if not post_ids:
            return {}

        stats: dict[uuid.UUID, dict[str, int | bool]] = {
            post_id: {"like_count": 0, "comment_count": 0, "liked": False, "bookmarked": False}
            for post_id in post_ids
        }

        like_stmt = (
            select(PostLike.post_id, func.count(PostLike.id))
            .where(PostLike.post_id.in_(post_ids))
            .group_by(PostLike.post_id)
        )
        for post_id, count in self.db.execute(like_stmt):
            stats[post_id]["like_count"] = int(count)

        comment_stmt = (
            select(PostComment.post_id, func.count(PostComment.id))
            .where(PostComment.post_id.in_(post_ids))
            .group_by(PostComment.post_id)
        )
        for post_id, count in self.db.execute(comment_stmt):
            stats[post_id]["comment_count"] = int(count)

        liked_stmt = select(PostLike.post_id).where(PostLike.post_id.in_(post_ids), PostLike.user_id == viewer_id)
        for post_id in self.db.scalars(liked_stmt):
            stats[post_id]["liked"] = True

        bookmarked_stmt = select(PostBookmark.post_id).where(
            PostBookmark.post_id.in_(post_ids),
            PostBookmark.user_id == viewer_id,
        )
        for post_id in self.db.scalars(bookmarked_stmt):
            stats[post_id]["bookmarked"] = True

        return stats

    def increment_impressions(self, post_id: uuid.UUID) -> None:
        stmt = update(Post).where(Post.id == post_id).values(impressions=Post.impressions + 1)
        self.db.execute(stmt)

    def delete(self, post: Post) -> None:
        self.db.delete(post)
        self.db.flush()
