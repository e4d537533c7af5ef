"""
관광지 좌표(locations 테이블) 처리

좌표 저장/조회/반경 검색은 PostGIS 함수를 쓰는 파라미터 바인딩 SQL 로 수행한다.
경도(longitude)가 ST_MakePoint 의 첫 번째 인자라는 점에 주의.
"""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.models import new_id
from ..schemas.attraction import GeoPoint

_POINT = "ST_SetSRID(ST_MakePoint(:longitude, :latitude), 4326)::geography"

INSERT_POINT_SQL = text(
    f"""
    INSERT INTO locations (id, attraction_id, geo)
    VALUES (:id, :attraction_id, {_POINT})
    """
)

DELETE_POINT_SQL = text("DELETE FROM locations WHERE attraction_id = :attraction_id")

SELECT_POINTS_SQL = text(
    """
    SELECT
        l.attraction_id,
        ST_Y(l.geo::geometry) AS latitude,
        ST_X(l.geo::geometry) AS longitude
    FROM locations l
    WHERE l.attraction_id IN :attraction_ids
    """
).bindparams(bindparam("attraction_ids", expanding=True))

WITHIN_RADIUS_SQL = text(
    f"""
    SELECT
        l.attraction_id,
        ST_Distance(l.geo::geography, {_POINT}) / 1000.0 AS distance_km
    FROM locations l
    WHERE ST_DWithin(l.geo::geography, {_POINT}, :radius_m)
    ORDER BY distance_km ASC
    """
)


async def insert_point(db: AsyncSession, attraction_id: str, point: GeoPoint) -> None:
    await db.execute(
        INSERT_POINT_SQL,
        {
            "id": new_id(),
            "attraction_id": attraction_id,
            "longitude": point.longitude,
            "latitude": point.latitude,
        },
    )


async def delete_point(db: AsyncSession, attraction_id: str) -> None:
    await db.execute(DELETE_POINT_SQL, {"attraction_id": attraction_id})


async def replace_point(db: AsyncSession, attraction_id: str, point: GeoPoint) -> None:
    """기존 좌표를 지우고 새 좌표를 넣는다. 호출자의 트랜잭션 안에서 실행된다."""
    await delete_point(db, attraction_id)
    await insert_point(db, attraction_id, point)


async def get_points(db: AsyncSession, attraction_ids: Iterable[str]) -> dict[str, GeoPoint]:
    ids = list(dict.fromkeys(attraction_ids))
    if not ids:
        return {}
    result = await db.execute(SELECT_POINTS_SQL, {"attraction_ids": ids})
    return {
        row["attraction_id"]: GeoPoint(latitude=row["latitude"], longitude=row["longitude"])
        for row in result.mappings()
    }


async def find_within_radius(
    db: AsyncSession,
    *,
    latitude: float,
    longitude: float,
    radius_km: float,
) -> dict[str, float]:
    """반경 안의 관광지 id -> 거리(km). 가까운 순서로 정렬되어 있다."""
    result = await db.execute(
        WITHIN_RADIUS_SQL,
        {
            "longitude": longitude,
            "latitude": latitude,
            "radius_m": radius_km * 1000,
        },
    )
    return {row["attraction_id"]: float(row["distance_km"]) for row in result.mappings()}
