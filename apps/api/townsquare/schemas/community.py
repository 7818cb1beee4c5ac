from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class CommunityItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None
    image: str | None
    created_at: datetime


class CommunityListResponse(BaseModel):
    communities: list[CommunityItem]
