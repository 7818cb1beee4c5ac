from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from townsquare.models.user import User
from townsquare.repositories.user_repo import UserRepository
from townsquare.schemas.user import UpdateMeRequest


class UserService:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.user_repo = UserRepository(db)

    def get_user(self, user_pk: UUID) -> User:
        user = self.user_repo.get_by_id(user_pk)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        return user

    def get_user_by_handle(self, handle: str) -> User:
        user = self.user_repo.get_by_handle(handle.strip().lstrip("@"))
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        return user

    def update_me(self, user: User, payload: UpdateMeRequest) -> User:
        if payload.username is not None:
            username = payload.username.strip()
            if len(username) < 3:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username is too short")
            user.username = username
        if payload.bio is not None:
            user.bio = payload.bio.strip() or None
        if payload.profile_image is not None:
            user.profile_image = payload.profile_image.strip() or None

        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
