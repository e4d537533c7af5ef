import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from redis.asyncio import Redis
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from ...dependencies import get_db, get_redis

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", summary="애플리케이션 헬스체크")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/health/ready", summary="DB/Redis 연결 확인")
async def readiness(db: AsyncSession = Depends(get_db), redis: Redis = Depends(get_redis)) -> JSONResponse:
    checks: dict[str, str] = {}
    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as exc:
        logger.warning("DB 연결 확인 실패: %s", exc)
        checks["database"] = "error"
    try:
        await redis.ping()
        checks["redis"] = "ok"
    except Exception as exc:
        logger.warning("Redis 연결 확인 실패: %s", exc)
        checks["redis"] = "error"

    ready = all(value == "ok" for value in checks.values())
    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "ok" if ready else "unavailable", "checks": checks},
    )
