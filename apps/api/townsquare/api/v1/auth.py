from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from townsquare.db.session import get_db
from townsquare.schemas.auth import (
    AuthResponse,
    GenericMessageResponse,
    LoginRequest,
    LogoutRequest,
    RegisterRequest,
)
from townsquare.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


def _client_info(request: Request) -> dict[str, str | None]:
    return {
        "ip": request.client.host if request.client else None,
        "user_agent": request.headers.get("user-agent"),
    }


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, request: Request, db: Session = Depends(get_db)):
    return AuthService(db).register(payload, **_client_info(request))


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, request: Request, db: Session = Depends(get_db)):
    return AuthService(db).login(payload, **_client_info(request))


@router.post("/logout", response_model=GenericMessageResponse)
def logout(payload: LogoutRequest, db: Session = Depends(get_db)):
    return AuthService(db).logout(payload)
