from __future__ import annotations

import logging
from collections.abc import Iterable

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..db.models import Attraction, Comment
from ..schemas.comment import CommentAttraction, CommentCreate, CommentOut
from ..schemas.common import Page
from ..schemas.user import UserSummary

logger = logging.getLogger(__name__)

IMAGE_SEPARATOR = ","


def join_images(urls: Iterable[str] | None) -> str | None:
    if not urls:
        return None
    return IMAGE_SEPARATOR.join(urls)


def split_images(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [url for url in raw.split(IMAGE_SEPARATOR) if url]


def average_rating(ratings: Iterable[float]) -> float | None:
    """댓글 별점의 산술 평균. 댓글이 없으면 None."""
    values = list(ratings)
    if not values:
        return None
    return sum(values) / len(values)


def to_comment_out(comment: Comment) -> CommentOut:
    return CommentOut(
        id=comment.id,
        content=comment.content,
        rating=comment.rating,
        images=split_images(comment.images),
        created_at=comment.created_at,
        updated_at=comment.updated_at,
        user=UserSummary(id=comment.user.id, name=comment.user.name, image=comment.user.image),
        attraction=CommentAttraction(id=comment.attraction.id, name=comment.attraction.name),
    )


def _with_relations():
    return select(Comment).options(selectinload(Comment.user), selectinload(Comment.attraction))


async def list_comments(db: AsyncSession, attraction_id: str, *, page: int = 1, limit: int = 10) -> Page[CommentOut]:
    total = await db.scalar(
        select(func.count()).select_from(Comment).where(Comment.attraction_id == attraction_id)
    ) or 0
    stmt = (
        _with_relations()
        .where(Comment.attraction_id == attraction_id)
        .order_by(Comment.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    comments = (await db.scalars(stmt)).all()
    return Page.build([to_comment_out(c) for c in comments], total=total, page=page, limit=limit)


async def create_comment(
    db: AsyncSession,
    attraction_id: str,
    user_id: str,
    payload: CommentCreate,
) -> CommentOut:
    """댓글을 저장하고 같은 트랜잭션에서 관광지 평균 별점을 다시 계산한다."""
    attraction = await db.get(Attraction, attraction_id)
    if attraction is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="관광지를 찾을 수 없습니다.")

    comment = Comment(
        content=payload.content,
        rating=payload.rating,
        images=join_images(payload.images),
        attraction_id=attraction_id,
        user_id=user_id,
    )
    db.add(comment)
    await db.flush()

    ratings = (await db.scalars(select(Comment.rating).where(Comment.attraction_id == attraction_id))).all()
    attraction.rating = average_rating(ratings)

    await db.commit()
    logger.info("댓글 등록: attraction=%s rating=%.2f (%d개)", attraction_id, attraction.rating or 0, len(ratings))

    created = (await db.scalars(_with_relations().where(Comment.id == comment.id))).one()
    return to_comment_out(created)
