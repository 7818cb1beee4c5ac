from pydantic import BaseModel, EmailStr, Field

from townsquare.schemas.user import UserPublic


class RegisterRequest(BaseModel):
    email: EmailStr
    username: str = Field(min_length=3, max_length=30)
    handle: str = Field(min_length=3, max_length=30, pattern=r"^[a-zA-Z0-9_]{3,30}$")
    password: str = Field(min_length=8, max_length=128)


class LoginRequest(BaseModel):
    principal: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=128)


class LogoutRequest(BaseModel):
    refresh_token: str = Field(min_length=16)
    everywhere: bool = False


class TokenPayload(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class AuthResponse(BaseModel):
    user: UserPublic
    token: TokenPayload


class GenericMessageResponse(BaseModel):
    message: str
