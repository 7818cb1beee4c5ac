import hashlib
import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
from passlib.context import CryptContext

from townsquare.core.config import settings

JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_TYPE = "access"

pwd_context = CryptContext(schemes=["argon2", "bcrypt"], deprecated="auto")


class TokenError(Exception):
    pass


@dataclass(frozen=True)
class AccessClaims:
    user_id: uuid.UUID
    handle: str


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    # seeded or imported rows may carry a hash scheme we do not know
    try:
        return pwd_context.verify(plain_password, password_hash)
    except ValueError:
        return False


def create_access_token(*, user_id: uuid.UUID, handle: str) -> tuple[str, int]:
    """Sign a short-lived access token and return it with its lifetime in seconds."""
    lifetime = timedelta(minutes=settings.access_token_expire_minutes)
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {
            "sub": str(user_id),
            "handle": handle,
            "type": ACCESS_TOKEN_TYPE,
            "iat": now,
            "exp": now + lifetime,
        },
        settings.secret_key,
        algorithm=JWT_ALGORITHM,
    )
    return token, int(lifetime.total_seconds())


def decode_access_token(token: str) -> AccessClaims:
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[JWT_ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
    except jwt.PyJWTError as exc:
        raise TokenError("invalid token") from exc

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise TokenError("invalid token type")
    try:
        user_id = uuid.UUID(str(payload["sub"]))
    except ValueError as exc:
        raise TokenError("invalid subject") from exc
    return AccessClaims(user_id=user_id, handle=str(payload.get("handle", "")))


def new_refresh_token() -> tuple[str, str]:
    """Return ``(raw, digest)``; only the digest is persisted."""
    raw = secrets.token_urlsafe(48)
    return raw, refresh_token_digest(raw)


def refresh_token_digest(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()
