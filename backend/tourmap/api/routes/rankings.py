from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...dependencies import get_db
from ...schemas import RankingBoard, RankingEntry, RankingType
from ...services import rankings as ranking_service

router = APIRouter()


@router.get("/ranking", response_model=RankingBoard, summary="방문/가고 싶음 상위 10")
async def ranking_board(db: AsyncSession = Depends(get_db)) -> RankingBoard:
    return await ranking_service.get_ranking_board(db)


@router.get("/rankings", response_model=list[RankingEntry], summary="유형별 순위 (상위 50)")
async def rankings(
    ranking_type: RankingType = Query(default="visited", alias="type"),
    db: AsyncSession = Depends(get_db),
) -> list[RankingEntry]:
    return await ranking_service.get_rankings(db, ranking_type)
