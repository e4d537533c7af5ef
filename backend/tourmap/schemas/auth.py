from datetime import datetime

from pydantic import EmailStr, Field

from .common import CamelModel
from .user import UserPublic


class LoginResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    user: UserPublic


class RefreshResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"


class MobileAuthRequest(CamelModel):
    email: EmailStr
    provider: str = Field(..., min_length=1)
    provider_id: str = Field(..., min_length=1)


class MobileUser(CamelModel):
    id: str
    email: str | None = None
    name: str | None = None
    image: str | None = None


class MobileAuthResponse(CamelModel):
    token: str
    user: MobileUser


class SessionInfo(CamelModel):
    session_id: str
    status: str
    provider: str | None = None
    created_at: datetime | None = None
    last_seen: datetime | None = None
    ip: str | None = None
    user_agent: str | None = None
    is_current: bool = False
