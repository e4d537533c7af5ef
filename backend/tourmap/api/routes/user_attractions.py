from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.auth import get_current_user
from ...dependencies import get_db
from ...schemas import UserAttractions, UserPublic, VisitMark
from ...services import user_attractions as user_attraction_service

router = APIRouter()


@router.get("/attractions", response_model=UserAttractions, summary="내가 방문/가고 싶은 관광지")
async def my_attractions(
    current_user: UserPublic = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> UserAttractions:
    return await user_attraction_service.get_user_attractions(db, current_user.id)


@router.post("/attractions", summary="방문/가고 싶음 표시")
async def mark_attraction(
    payload: VisitMark,
    current_user: UserPublic = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, bool]:
    await user_attraction_service.mark_attraction(db, current_user.id, payload.attraction_id, payload.type)
    return {"success": True}


@router.delete("/attractions", summary="표시 취소")
async def unmark_attraction(
    payload: VisitMark,
    current_user: UserPublic = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, bool]:
    await user_attraction_service.unmark_attraction(db, current_user.id, payload.attraction_id, payload.type)
    return {"success": True}
