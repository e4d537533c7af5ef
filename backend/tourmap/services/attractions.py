from __future__ import annotations

import logging
from typing import Any

from fastapi import HTTPException, status
from sqlalchemy import Select, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..db.models import Attraction, utcnow, visited_attractions, want_to_visit_attractions
from ..schemas.attraction import (
    AttractionCreate,
    AttractionFilters,
    AttractionOut,
    AttractionUpdate,
    GeoPoint,
    LocationPayload,
    VisitCounts,
)
from ..schemas.common import Page
from ..schemas.user import UserPublic, UserSummary
from . import locations

logger = logging.getLogger(__name__)

# null 로 비울 수 있는 필드 (나머지는 null 이면 무시)
NULLABLE_FIELDS = {"opening_hours", "contact", "website"}


def visited_count_column():
    return (
        select(func.count())
        .select_from(visited_attractions)
        .where(visited_attractions.c.attraction_id == Attraction.id)
        .correlate(Attraction)
        .scalar_subquery()
        .label("visited_count")
    )


def want_to_visit_count_column():
    return (
        select(func.count())
        .select_from(want_to_visit_attractions)
        .where(want_to_visit_attractions.c.attraction_id == Attraction.id)
        .correlate(Attraction)
        .scalar_subquery()
        .label("want_to_visit_count")
    )


def _detail_query() -> Select:
    return select(Attraction, visited_count_column(), want_to_visit_count_column()).options(
        selectinload(Attraction.created_by)
    )


def _filter_conditions(filters: AttractionFilters | None) -> list[Any]:
    if filters is None:
        return []
    conditions: list[Any] = []
    if filters.city:
        conditions.append(Attraction.city == filters.city)
    if filters.category:
        conditions.append(Attraction.category == filters.category)
    if filters.min_price is not None:
        conditions.append(Attraction.price >= filters.min_price)
    if filters.max_price is not None:
        conditions.append(Attraction.price <= filters.max_price)
    if filters.q:
        conditions.append(Attraction.name.icontains(filters.q, autoescape=True))
    return conditions


def brief_fields(attraction: Attraction) -> dict[str, Any]:
    return {
        "id": attraction.id,
        "name": attraction.name,
        "description": attraction.description,
        "images": list(attraction.images or []),
        "address": attraction.address or "",
        "city": attraction.city or "",
        "province": attraction.province or "",
        "country": attraction.country or "",
        "category": attraction.category or "",
        "price": attraction.price or 0,
        "rating": attraction.rating,
        "created_at": attraction.created_at,
        "updated_at": attraction.updated_at,
    }


def to_attraction_out(
    attraction: Attraction,
    *,
    visited_count: int = 0,
    want_to_visit_count: int = 0,
    point: GeoPoint | None = None,
    distance_km: float | None = None,
) -> AttractionOut:
    creator = attraction.created_by
    return AttractionOut(
        **brief_fields(attraction),
        opening_hours=attraction.opening_hours,
        contact=attraction.contact,
        website=attraction.website,
        location=LocationPayload(geo=point) if point else None,
        counts=VisitCounts(visited_by=visited_count or 0, want_to_visit_by=want_to_visit_count or 0),
        created_by=UserSummary(id=creator.id, name=creator.name, image=creator.image) if creator else None,
        distance_km=round(distance_km, 3) if distance_km is not None else None,
    )


async def list_attractions(
    db: AsyncSession,
    *,
    page: int = 1,
    limit: int = 10,
    filters: AttractionFilters | None = None,
    latitude: float | None = None,
    longitude: float | None = None,
    radius_km: float | None = None,
    require_location: bool = True,
) -> Page[AttractionOut]:
    """
    관광지 목록 (최신순)

    위도/경도/반경이 모두 주어지면 반경 안의 관광지만 돌려주고 각 항목에 거리(km)를 채운다.
    관리자 목록은 require_location=False 로 좌표 없는 관광지도 포함한다.
    """
    conditions = _filter_conditions(filters)
    if require_location:
        conditions.append(Attraction.location.has())

    distances: dict[str, float] = {}
    if latitude is not None and longitude is not None and radius_km is not None:
        distances = await locations.find_within_radius(
            db, latitude=latitude, longitude=longitude, radius_km=radius_km
        )
        if not distances:
            return Page.build([], total=0, page=page, limit=limit)
        conditions.append(Attraction.id.in_(list(distances)))

    total = await db.scalar(select(func.count()).select_from(Attraction).where(*conditions)) or 0

    stmt = (
        _detail_query()
        .where(*conditions)
        .order_by(Attraction.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    rows = (await db.execute(stmt)).all()
    points = await locations.get_points(db, [row.Attraction.id for row in rows])

    items = [
        to_attraction_out(
            row.Attraction,
            visited_count=row.visited_count,
            want_to_visit_count=row.want_to_visit_count,
            point=points.get(row.Attraction.id),
            distance_km=distances.get(row.Attraction.id),
        )
        for row in rows
    ]
    return Page.build(items, total=total, page=page, limit=limit)


async def get_attraction(db: AsyncSession, attraction_id: str) -> AttractionOut:
    row = (await db.execute(_detail_query().where(Attraction.id == attraction_id))).first()
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="관광지를 찾을 수 없습니다.")
    points = await locations.get_points(db, [attraction_id])
    return to_attraction_out(
        row.Attraction,
        visited_count=row.visited_count,
        want_to_visit_count=row.want_to_visit_count,
        point=points.get(attraction_id),
    )


async def create_attraction(db: AsyncSession, user_id: str, payload: AttractionCreate) -> AttractionOut:
    data = payload.model_dump(exclude={"location"})
    attraction = Attraction(**data, created_by_id=user_id)
    db.add(attraction)
    await db.flush()

    if payload.location is not None:
        await locations.insert_point(db, attraction.id, payload.location.geo)

    await db.commit()
    logger.info("관광지 생성: %s (%s) by %s", attraction.name, attraction.id, user_id)
    return await get_attraction(db, attraction.id)


async def _get_editable(db: AsyncSession, attraction_id: str, user: UserPublic, action: str) -> Attraction:
    attraction = await db.get(Attraction, attraction_id)
    if attraction is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="관광지를 찾을 수 없습니다.")
    if attraction.created_by_id != user.id and not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=f"이 관광지를 {action}할 권한이 없습니다.")
    return attraction


async def update_attraction(
    db: AsyncSession,
    attraction_id: str,
    user: UserPublic,
    payload: AttractionUpdate,
) -> AttractionOut:
    attraction = await _get_editable(db, attraction_id, user, "수정")

    data = payload.model_dump(exclude_unset=True, exclude={"location"})
    for field, value in data.items():
        if value is None and field not in NULLABLE_FIELDS:
            continue
        setattr(attraction, field, value)
    attraction.updated_at = utcnow()

    if payload.location is not None:
        await locations.replace_point(db, attraction_id, payload.location.geo)

    await db.commit()
    return await get_attraction(db, attraction_id)


async def delete_attraction(db: AsyncSession, attraction_id: str, user: UserPublic) -> None:
    await _get_editable(db, attraction_id, user, "삭제")

    await locations.delete_point(db, attraction_id)
    await db.execute(delete(Attraction).where(Attraction.id == attraction_id))
    await db.commit()
    logger.info("관광지 삭제: %s by %s", attraction_id, user.id)
