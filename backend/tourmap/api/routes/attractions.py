from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.auth import get_current_user
from ...core.config import settings
from ...dependencies import get_db
from ...schemas import (
    AttractionAction,
    AttractionCreate,
    AttractionFilters,
    AttractionOut,
    AttractionUpdate,
    ApiResponse,
    Page,
    UserPublic,
)
from ...services import attractions as attraction_service
from ...services import user_attractions as user_attraction_service

router = APIRouter()

ACTION_MARKS = {"visit": "visited", "wantToVisit": "wantToVisit"}


def get_filters(
    city: str | None = Query(default=None),
    category: str | None = Query(default=None),
    min_price: float | None = Query(default=None, alias="minPrice", ge=0),
    max_price: float | None = Query(default=None, alias="maxPrice", ge=0),
    q: str | None = Query(default=None, description="이름 검색어"),
) -> AttractionFilters:
    return AttractionFilters(city=city, category=category, min_price=min_price, max_price=max_price, q=q)


@router.get("", response_model=ApiResponse[Page[AttractionOut]], summary="관광지 목록")
async def list_attractions(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.default_page_size, ge=1, le=settings.max_page_size),
    lat: float | None = Query(default=None, ge=-90, le=90, description="검색 중심 위도"),
    lng: float | None = Query(default=None, ge=-180, le=180, description="검색 중심 경도"),
    radius: float = Query(default=settings.default_search_radius_km, gt=0, description="검색 반경(km)"),
    filters: AttractionFilters = Depends(get_filters),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[Page[AttractionOut]]:
    if (lat is None) != (lng is None):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="lat 과 lng 는 함께 전달해야 합니다.")
    result = await attraction_service.list_attractions(
        db,
        page=page,
        limit=limit,
        filters=filters,
        latitude=lat,
        longitude=lng,
        radius_km=radius if lat is not None else None,
    )
    return ApiResponse(data=result)


@router.post(
    "",
    response_model=ApiResponse[AttractionOut],
    status_code=status.HTTP_201_CREATED,
    summary="관광지 등록",
)
async def create_attraction(
    payload: AttractionCreate,
    current_user: UserPublic = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[AttractionOut]:
    attraction = await attraction_service.create_attraction(db, current_user.id, payload)
    return ApiResponse(message="created", data=attraction)


@router.get("/{attraction_id}", response_model=ApiResponse[AttractionOut], summary="관광지 상세")
async def get_attraction(attraction_id: str, db: AsyncSession = Depends(get_db)) -> ApiResponse[AttractionOut]:
    return ApiResponse(data=await attraction_service.get_attraction(db, attraction_id))


@router.put("/{attraction_id}", response_model=ApiResponse[AttractionOut], summary="관광지 수정")
async def update_attraction(
    attraction_id: str,
    payload: AttractionUpdate,
    current_user: UserPublic = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[AttractionOut]:
    attraction = await attraction_service.update_attraction(db, attraction_id, current_user, payload)
    return ApiResponse(message="updated", data=attraction)


@router.delete("/{attraction_id}", response_model=ApiResponse[None], summary="관광지 삭제")
async def delete_attraction(
    attraction_id: str,
    current_user: UserPublic = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[None]:
    await attraction_service.delete_attraction(db, attraction_id, current_user)
    return ApiResponse(message="deleted")


@router.patch("/{attraction_id}", response_model=ApiResponse[AttractionOut], summary="방문/가고 싶음 표시")
async def mark_attraction(
    attraction_id: str,
    payload: AttractionAction,
    current_user: UserPublic = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[AttractionOut]:
    await user_attraction_service.mark_attraction(
        db, current_user.id, attraction_id, ACTION_MARKS[payload.action]
    )
    return ApiResponse(message="updated", data=await attraction_service.get_attraction(db, attraction_id))
