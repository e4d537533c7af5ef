from __future__ import annotations

import logging

from fastapi import HTTPException, status
from sqlalchemy import Table, delete, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.models import Attraction, User, visited_attractions, want_to_visit_attractions
from ..schemas.attraction import AttractionBrief
from ..schemas.ranking import RankingType
from ..schemas.visits import UserAttractions
from .attractions import brief_fields

logger = logging.getLogger(__name__)

MARK_TABLES: dict[str, Table] = {
    "visited": visited_attractions,
    "wantToVisit": want_to_visit_attractions,
}


async def _require_user(db: AsyncSession, user_id: str) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="사용자를 찾을 수 없습니다.")
    return user


async def _marked(db: AsyncSession, table: Table, user_id: str) -> list[AttractionBrief]:
    stmt = (
        select(Attraction)
        .join(table, table.c.attraction_id == Attraction.id)
        .where(table.c.user_id == user_id)
        .order_by(table.c.created_at.desc())
    )
    attractions = (await db.scalars(stmt)).all()
    return [AttractionBrief(**brief_fields(a)) for a in attractions]


async def get_user_attractions(db: AsyncSession, user_id: str) -> UserAttractions:
    await _require_user(db, user_id)
    return UserAttractions(
        visited=await _marked(db, visited_attractions, user_id),
        want_to_visit=await _marked(db, want_to_visit_attractions, user_id),
    )


async def mark_attraction(db: AsyncSession, user_id: str, attraction_id: str, mark_type: RankingType) -> None:
    """방문/가고 싶음 표시. 이미 표시된 경우 아무 일도 하지 않는다."""
    await _require_user(db, user_id)
    if await db.get(Attraction, attraction_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="관광지를 찾을 수 없습니다.")

    table = MARK_TABLES[mark_type]
    await db.execute(
        insert(table)
        .values(user_id=user_id, attraction_id=attraction_id)
        .on_conflict_do_nothing(index_elements=[table.c.user_id, table.c.attraction_id])
    )
    await db.commit()
    logger.info("관광지 표시: user=%s attraction=%s type=%s", user_id, attraction_id, mark_type)


async def unmark_attraction(db: AsyncSession, user_id: str, attraction_id: str, mark_type: RankingType) -> None:
    table = MARK_TABLES[mark_type]
    await db.execute(
        delete(table).where(table.c.user_id == user_id, table.c.attraction_id == attraction_id)
    )
    await db.commit()
