from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.models import Attraction
from ..schemas.ranking import RankedAttraction, RankingBoard, RankingEntry, RankingType
from .attractions import brief_fields, visited_count_column, want_to_visit_count_column

BOARD_SIZE = 10
RANKING_LIMIT = 50


def _count_column(ranking_type: RankingType):
    if ranking_type == "visited":
        return visited_count_column()
    return want_to_visit_count_column()


async def _ranked_rows(db: AsyncSession, ranking_type: RankingType, limit: int):
    count = _count_column(ranking_type)
    stmt = (
        select(Attraction, count)
        .order_by(count.desc(), Attraction.created_at.desc())
        .limit(limit)
    )
    return (await db.execute(stmt)).all()


async def get_rankings(db: AsyncSession, ranking_type: RankingType, limit: int = RANKING_LIMIT) -> list[RankingEntry]:
    rows = await _ranked_rows(db, ranking_type, limit)
    return [
        RankingEntry(
            id=attraction.id,
            name=attraction.name,
            description=attraction.description,
            images=list(attraction.images or []),
            count=count or 0,
        )
        for attraction, count in rows
    ]


def _ranked(attraction: Attraction, **counts: int) -> RankedAttraction:
    return RankedAttraction(**brief_fields(attraction), **counts)


async def get_ranking_board(db: AsyncSession, limit: int = BOARD_SIZE) -> RankingBoard:
    visited = await _ranked_rows(db, "visited", limit)
    wanted = await _ranked_rows(db, "wantToVisit", limit)
    return RankingBoard(
        visited_ranking=[_ranked(a, visited_count=c or 0) for a, c in visited],
        want_to_visit_ranking=[_ranked(a, want_to_visit_count=c or 0) for a, c in wanted],
    )
