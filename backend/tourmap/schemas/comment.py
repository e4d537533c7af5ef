from datetime import datetime

from pydantic import Field

from .common import CamelModel, UrlStr
from .user import UserSummary


class CommentCreate(CamelModel):
    content: str = Field(..., min_length=1, max_length=500, description="댓글 내용")
    rating: int = Field(..., ge=1, le=5, description="별점 (1~5)")
    images: list[UrlStr] | None = None


class CommentAttraction(CamelModel):
    id: str
    name: str


class CommentOut(CamelModel):
    id: str
    content: str
    rating: int
    images: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
    user: UserSummary
    attraction: CommentAttraction
