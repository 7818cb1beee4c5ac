from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from townsquare.models.community import Community, CommunityMembership
from townsquare.models.user import User
from townsquare.schemas.auth import GenericMessageResponse
from townsquare.schemas.community import CommunityItem, CommunityListResponse


class CommunityService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def list_user_communities(self, *, user: User) -> CommunityListResponse:
        stmt = (
            select(Community)
            .join(CommunityMembership, CommunityMembership.community_id == Community.id)
            .where(CommunityMembership.user_id == user.id)
            .order_by(Community.name.asc())
        )
        return CommunityListResponse(communities=[CommunityItem.model_validate(row) for row in self.db.scalars(stmt)])

    def join(self, *, user: User, community_id: UUID) -> GenericMessageResponse:
        community = self.db.scalar(select(Community).where(Community.id == community_id))
        if not community:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Community not found")

        exists = self.db.scalar(
            select(CommunityMembership).where(
                CommunityMembership.user_id == user.id,
                CommunityMembership.community_id == community.id,
            )
        )
        if exists:
            return GenericMessageResponse(message="Already a member")

        self.db.add(CommunityMembership(user_id=user.id, community_id=community.id))
        self.db.commit()
        return GenericMessageResponse(message="Joined")

    def leave(self, *, user: User, community_id: UUID) -> GenericMessageResponse:
        stmt = delete(CommunityMembership).where(
            CommunityMembership.user_id == user.id,
            CommunityMembership.community_id == community_id,
        )
        self.db.execute(stmt)
        self.db.commit()
        return GenericMessageResponse(message="Left community")
