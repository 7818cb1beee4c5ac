from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from townsquare.core.security import TokenError, decode_access_token
from townsquare.db.session import get_db
from townsquare.models.user import User
from townsquare.repositories.user_repo import UserRepository

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None:
        raise _unauthorized("Unauthorized")

    try:
        claims = decode_access_token(credentials.credentials)
    except TokenError as exc:
        raise _unauthorized("Invalid token") from exc

    # deleted accounts keep valid tokens until expiry; the lookup filters them out
    user = UserRepository(db).get_by_id(claims.user_id)
    if user is None:
        raise _unauthorized("User not found")
    return user
