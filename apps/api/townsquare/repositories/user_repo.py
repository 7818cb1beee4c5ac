import uuid

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from townsquare.models.user import User


class UserRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def _first(self, *conditions) -> User | None:
        stmt = select(User).where(*conditions, User.is_deleted.is_(False)).limit(1)
        return self.db.scalar(stmt)

    def get_by_id(self, user_pk: uuid.UUID) -> User | None:
        return self._first(User.id == user_pk)

    def get_by_handle(self, handle: str) -> User | None:
        return self._first(User.handle == handle)

    def get_by_email(self, email: str) -> User | None:
        return self._first(func.lower(User.email) == email.lower())

    def get_by_principal(self, principal: str) -> User | None:
        """Sign-in lookup: ``principal`` is either a handle or an email address."""
        if "@" in principal:
            return self.get_by_email(principal)
        return self._first(or_(User.handle == principal, User.email == principal))

    def create(self, *, handle: str, email: str, username: str, password_hash: str, **profile) -> User:
        user = User(
            handle=handle,
            email=email.lower(),
            username=username,
            password_hash=password_hash,
            bio=profile.get("bio"),
            profile_image=profile.get("profile_image"),
        )
        self.db.add(user)
        self.db.flush()
        return user
