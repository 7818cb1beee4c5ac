from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from townsquare.schemas.user import UserSummary


class CreatePostRequest(BaseModel):
    text: str = Field(min_length=1, max_length=300)
    images: list[str] = Field(default_factory=list)
    community_id: UUID | None = None


class PostItem(BaseModel):
    id: UUID
    text: str
    images: list[str] = Field(default_factory=list)
    author: UserSummary
    community_id: UUID | None
    impressions: int
    like_count: int
    comment_count: int
    liked: bool
    bookmarked: bool
    created_at: datetime
    updated_at: datetime


class PostListResponse(BaseModel):
    items: list[PostItem]
    page: int
    page_size: int


class CreateCommentRequest(BaseModel):
    text: str = Field(min_length=1, max_length=300)


class CommentItem(BaseModel):
    id: UUID
    post_id: UUID
    author: UserSummary
    text: str
    created_at: datetime


class CommentListResponse(BaseModel):
    comments: list[CommentItem]
