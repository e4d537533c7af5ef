from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.auth import check_admin
from ...core.config import settings
from ...dependencies import get_db
from ...schemas import ApiResponse, AttractionCreate, AttractionFilters, AttractionOut, AttractionUpdate, Page, UserPublic
from ...services import attractions as attraction_service

router = APIRouter()


@router.get("/attractions", response_model=ApiResponse[Page[AttractionOut]])
async def list_attractions_endpoint(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.default_page_size, ge=1, le=settings.max_page_size),
    q: str | None = Query(default=None),
    current_user: UserPublic = Depends(check_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[Page[AttractionOut]]:
    """전체 관광지 목록 (좌표 없는 관광지 포함)"""
    result = await attraction_service.list_attractions(
        db, page=page, limit=limit, filters=AttractionFilters(q=q), require_location=False
    )
    return ApiResponse(data=result)


@router.post("/attractions", response_model=ApiResponse[AttractionOut], status_code=status.HTTP_201_CREATED)
async def create_attraction_endpoint(
    payload: AttractionCreate,
    current_user: UserPublic = Depends(check_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[AttractionOut]:
    """관광지 생성"""
    attraction = await attraction_service.create_attraction(db, current_user.id, payload)
    return ApiResponse(message="created", data=attraction)


@router.put("/attractions/{attraction_id}", response_model=ApiResponse[AttractionOut])
async def update_attraction_endpoint(
    attraction_id: str,
    payload: AttractionUpdate,
    current_user: UserPublic = Depends(check_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[AttractionOut]:
    attraction = await attraction_service.update_attraction(db, attraction_id, current_user, payload)
    return ApiResponse(message="updated", data=attraction)


@router.delete("/attractions/{attraction_id}", response_model=ApiResponse[None])
async def delete_attraction_endpoint(
    attraction_id: str,
    current_user: UserPublic = Depends(check_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[None]:
    """관광지 삭제 (좌표, 댓글, 방문 표시 포함)"""
    await attraction_service.delete_attraction(db, attraction_id, current_user)
    return ApiResponse(message="deleted")
