from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class UserPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    handle: str
    email: str
    username: str
    bio: str | None
    profile_image: str | None
    created_at: datetime


class UserProfile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    handle: str
    username: str
    bio: str | None
    profile_image: str | None
    created_at: datetime


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    handle: str
    username: str
    profile_image: str | None


class UpdateMeRequest(BaseModel):
    username: str | None = Field(default=None, min_length=3, max_length=30)
    bio: str | None = Field(default=None, max_length=160)
    profile_image: str | None = None


class UserListResponse(BaseModel):
    users: list[UserSummary]


class FollowCountsResponse(BaseModel):
    user_id: UUID
    followers: int
    following: int


class FollowStatusResponse(BaseModel):
    follower_id: UUID
    target_id: UUID
    following: bool
