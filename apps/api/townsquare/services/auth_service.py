import logging
import uuid

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from townsquare.core.security import (
    create_access_token,
    hash_password,
    new_refresh_token,
    verify_password,
)
from townsquare.infra.redis_client import LoginThrottle, get_redis
from townsquare.repositories.session_repo import SessionRepository
from townsquare.repositories.user_repo import UserRepository
from townsquare.schemas.auth import (
    AuthResponse,
    GenericMessageResponse,
    LoginRequest,
    LogoutRequest,
    RegisterRequest,
    TokenPayload,
)
from townsquare.schemas.user import UserPublic

logger = logging.getLogger(__name__)

GENERIC_LOGIN_ERROR = "Invalid credentials"


class AuthService:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.user_repo = UserRepository(db)
        self.session_repo = SessionRepository(db)
        self.throttle = LoginThrottle(get_redis())

    def register(self, payload: RegisterRequest, *, ip: str | None, user_agent: str | None) -> AuthResponse:
        handle = payload.handle.strip()
        email = payload.email.lower().strip()

        if self.user_repo.get_by_handle(handle):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Handle already taken")
        if self.user_repo.get_by_email(email):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

        user = self.user_repo.create(
            handle=handle,
            email=email,
            username=payload.username.strip(),
            password_hash=hash_password(payload.password),
        )
        token = self._start_session(user.id, user.handle, ip=ip, user_agent=user_agent)
        self.db.commit()
        self.db.refresh(user)

        logger.info("registered user", extra={"handle": user.handle})
        return AuthResponse(user=UserPublic.model_validate(user), token=token)

    def login(self, payload: LoginRequest, *, ip: str | None, user_agent: str | None) -> AuthResponse:
        # handles are case sensitive, emails are not
        principal = payload.principal.strip()
        if "@" in principal:
            principal = principal.lower()

        if self.throttle.is_locked(principal, ip):
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Too many failed sign-in attempts, try again later",
            )

        user = self.user_repo.get_by_principal(principal)
        if user is None or not verify_password(payload.password, user.password_hash):
            self.throttle.record_failure(principal, ip)
            logger.info("sign-in rejected", extra={"principal": principal, "ip": ip})
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=GENERIC_LOGIN_ERROR)

        self.throttle.clear(principal, ip)
        token = self._start_session(user.id, user.handle, ip=ip, user_agent=user_agent)
        self.db.commit()
        return AuthResponse(user=UserPublic.model_validate(user), token=token)

    def logout(self, payload: LogoutRequest) -> GenericMessageResponse:
        session = self.session_repo.find_active(payload.refresh_token)
        if session is None:
            return GenericMessageResponse(message="Signed out")

        if payload.everywhere:
            self.session_repo.revoke_all(session.user_id)
        else:
            self.session_repo.revoke(session)
        self.db.commit()
        return GenericMessageResponse(message="Signed out")

    def _start_session(
        self,
        user_id: uuid.UUID,
        handle: str,
        *,
        ip: str | None,
        user_agent: str | None,
    ) -> TokenPayload:
        access_token, expires_in = create_access_token(user_id=user_id, handle=handle)
        refresh_token, digest = new_refresh_token()
        self.session_repo.open(user_id=user_id, token_digest=digest, ip=ip, user_agent=user_agent)
        return TokenPayload(access_token=access_token, refresh_token=refresh_token, expires_in=expires_in)
