from datetime import datetime
from typing import Any, Literal

from pydantic import Field, field_validator

from .common import CamelModel, UrlStr
from .user import UserSummary


class GeoPoint(CamelModel):
    latitude: float = Field(..., ge=-90, le=90, description="위도")
    longitude: float = Field(..., ge=-180, le=180, description="경도")


class LocationPayload(CamelModel):
    geo: GeoPoint


class VisitCounts(CamelModel):
    visited_by: int = 0
    want_to_visit_by: int = 0


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class AttractionCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    images: list[UrlStr] = Field(default_factory=list)
    address: str = ""
    city: str = ""
    province: str = ""
    country: str = ""
    category: str = ""
    price: float = Field(default=0, ge=0)
    opening_hours: str | None = None
    contact: str | None = None
    website: UrlStr | None = None
    location: LocationPayload | None = None

    @field_validator("website", "opening_hours", "contact", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)


class AttractionUpdate(CamelModel):
    """부분 수정. 전달된 필드만 반영된다."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, min_length=1)
    images: list[UrlStr] | None = None
    address: str | None = None
    city: str | None = None
    province: str | None = None
    country: str | None = None
    category: str | None = None
    price: float | None = Field(default=None, ge=0)
    opening_hours: str | None = None
    contact: str | None = None
    website: UrlStr | None = None
    location: LocationPayload | None = None

    @field_validator("website", "opening_hours", "contact", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)


class AttractionAction(CamelModel):
    action: Literal["visit", "wantToVisit"]


class AttractionBrief(CamelModel):
    id: str
    name: str
    description: str
    images: list[str] = Field(default_factory=list)
    address: str = ""
    city: str = ""
    province: str = ""
    country: str = ""
    category: str = ""
    price: float = 0
    rating: float | None = None
    created_at: datetime
    updated_at: datetime


class AttractionOut(AttractionBrief):
    opening_hours: str | None = None
    contact: str | None = None
    website: str | None = None
    location: LocationPayload | None = None
    counts: VisitCounts = Field(default_factory=VisitCounts, alias="_count")
    created_by: UserSummary | None = None
    distance_km: float | None = None


class AttractionFilters(CamelModel):
    city: str | None = None
    category: str | None = None
    min_price: float | None = Field(default=None, ge=0)
    max_price: float | None = Field(default=None, ge=0)
    q: str | None = None
