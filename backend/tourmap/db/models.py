"""관계형 스키마 (PostgreSQL + PostGIS)."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from geoalchemy2 import Geography
from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Table, Text, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def new_id() -> str:
    return uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


visited_attractions = Table(
    "visited_attractions",
    Base.metadata,
    Column("user_id", String(32), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("attraction_id", String(32), ForeignKey("attractions.id", ondelete="CASCADE"), primary_key=True),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)

want_to_visit_attractions = Table(
    "want_to_visit_attractions",
    Base.metadata,
    Column("user_id", String(32), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("attraction_id", String(32), ForeignKey("attractions.id", ondelete="CASCADE"), primary_key=True),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    name: Mapped[str | None] = mapped_column(String(255))
    email: Mapped[str | None] = mapped_column(String(320), unique=True, index=True)
    email_verified: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    image: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    accounts: Mapped[list[Account]] = relationship(
        back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
    visited_attractions: Mapped[list[Attraction]] = relationship(
        secondary=visited_attractions, back_populates="visited_by", passive_deletes=True
    )
    want_to_visit_attractions: Mapped[list[Attraction]] = relationship(
        secondary=want_to_visit_attractions, back_populates="want_to_visit_by", passive_deletes=True
    )


class Account(Base):
    __tablename__ = "accounts"
    __table_args__ = (UniqueConstraint("provider", "provider_account_id", name="uq_accounts_provider_account"),)

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(32), ForeignKey("users.id", ondelete="CASCADE"), index=True)
    type: Mapped[str] = mapped_column(String(32), default="oauth")
    provider: Mapped[str] = mapped_column(String(50))
    provider_account_id: Mapped[str] = mapped_column(String(255))
    access_token: Mapped[str | None] = mapped_column(Text)
    refresh_token: Mapped[str | None] = mapped_column(Text)
    expires_at: Mapped[int | None] = mapped_column(Integer)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    user: Mapped[User] = relationship(back_populates="accounts")


class Attraction(Base):
    __tablename__ = "attractions"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str] = mapped_column(Text)
    images: Mapped[list[str]] = mapped_column(ARRAY(Text), default=list)
    address: Mapped[str] = mapped_column(Text, default="")
    city: Mapped[str] = mapped_column(String(100), default="", index=True)
    province: Mapped[str] = mapped_column(String(100), default="")
    country: Mapped[str] = mapped_column(String(100), default="")
    category: Mapped[str] = mapped_column(String(100), default="", index=True)
    price: Mapped[float] = mapped_column(Float, default=0)
    opening_hours: Mapped[str | None] = mapped_column(Text)
    contact: Mapped[str | None] = mapped_column(String(255))
    website: Mapped[str | None] = mapped_column(Text)
    rating: Mapped[float | None] = mapped_column(Float)
    created_by_id: Mapped[str] = mapped_column(String(32), ForeignKey("users.id"), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    created_by: Mapped[User] = relationship()
    location: Mapped[Location | None] = relationship(
        back_populates="attraction", uselist=False, cascade="all, delete-orphan", passive_deletes=True
    )
    comments: Mapped[list[Comment]] = relationship(
        back_populates="attraction", cascade="all, delete-orphan", passive_deletes=True
    )
    visited_by: Mapped[list[User]] = relationship(
        secondary=visited_attractions, back_populates="visited_attractions", passive_deletes=True
    )
    want_to_visit_by: Mapped[list[User]] = relationship(
        secondary=want_to_visit_attractions, back_populates="want_to_visit_attractions", passive_deletes=True
    )


class Location(Base):
    """관광지 좌표. 조회/반경 검색은 services.locations 의 SQL 로만 한다."""

    __tablename__ = "locations"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    attraction_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("attractions.id", ondelete="CASCADE"), unique=True
    )
    geo = mapped_column(Geography(geometry_type="POINT", srid=4326, spatial_index=True), nullable=False)

    attraction: Mapped[Attraction] = relationship(back_populates="location")


class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    content: Mapped[str] = mapped_column(Text)
    rating: Mapped[int] = mapped_column(Integer)
    images: Mapped[str | None] = mapped_column(Text)  # 콤마로 이어 붙인 URL
    user_id: Mapped[str] = mapped_column(String(32), ForeignKey("users.id", ondelete="CASCADE"), index=True)
    attraction_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("attractions.id", ondelete="CASCADE"), index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    user: Mapped[User] = relationship()
    attraction: Mapped[Attraction] = relationship(back_populates="comments")
