import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from townsquare.core.config import settings
from townsquare.core.security import refresh_token_digest
from townsquare.models.user_session import UserSession


class SessionRepository:
    """Refresh-token sessions. Raw tokens never reach the database, only their digest."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def open(
        self,
        *,
        user_id: uuid.UUID,
        token_digest: str,
        ip: str | None = None,
        user_agent: str | None = None,
    ) -> UserSession:
        row = UserSession(
            user_id=user_id,
            refresh_token_hash=token_digest,
            expires_at=datetime.now(timezone.utc) + timedelta(days=settings.refresh_token_expire_days),
            ip=ip,
            user_agent=(user_agent or "")[:512] or None,
        )
        self.db.add(row)
        self.db.flush()
        return row

    def find_active(self, raw_token: str) -> UserSession | None:
        return self.db.scalar(
            select(UserSession).where(
                UserSession.refresh_token_hash == refresh_token_digest(raw_token),
                UserSession.revoked_at.is_(None),
                UserSession.expires_at > datetime.now(timezone.utc),
            )
        )

    def revoke(self, row: UserSession) -> None:
        row.revoked_at = datetime.now(timezone.utc)

    def revoke_all(self, user_id: uuid.UUID) -> None:
        self.db.execute(
            update(UserSession)
            .where(UserSession.user_id == user_id, UserSession.revoked_at.is_(None))
            .values(revoked_at=datetime.now(timezone.utc))
        )
