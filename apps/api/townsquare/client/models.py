from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict


class FeedItem(BaseModel):
    """A post as the feed sees it: only ``id`` is interpreted, the rest is payload."""

    model_config = ConfigDict(extra="allow")

    id: str


class CommunityTab(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str


@dataclass(frozen=True, slots=True)
class CurrentUser:
    id: str
    handle: str
    access_token: str
