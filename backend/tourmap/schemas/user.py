from datetime import datetime

from .common import CamelModel


class UserSummary(CamelModel):
    id: str
    name: str | None = None
    image: str | None = None


class UserPublic(UserSummary):
    email: str | None = None
    created_at: datetime | None = None
    is_admin: bool = False
