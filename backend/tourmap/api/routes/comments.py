from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.auth import get_current_user
from ...core.config import settings
from ...dependencies import get_db
from ...schemas import ApiResponse, CommentCreate, CommentOut, Page, UserPublic
from ...services import comments as comment_service

router = APIRouter()


@router.get("/{attraction_id}/comments", response_model=ApiResponse[Page[CommentOut]], summary="관광지 댓글 목록")
async def list_comments(
    attraction_id: str,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.default_page_size, ge=1, le=settings.max_page_size),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[Page[CommentOut]]:
    comments = await comment_service.list_comments(db, attraction_id, page=page, limit=limit)
    return ApiResponse(data=comments)


@router.post(
    "/{attraction_id}/comments",
    response_model=ApiResponse[CommentOut],
    status_code=status.HTTP_201_CREATED,
    summary="댓글 작성",
)
async def create_comment(
    attraction_id: str,
    payload: CommentCreate,
    current_user: UserPublic = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[CommentOut]:
    comment = await comment_service.create_comment(db, attraction_id, current_user.id, payload)
    return ApiResponse(message="comment created", data=comment)
