from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_db, get_redis
from ..schemas.user import UserPublic
from ..services import sessions as session_service
from ..services import users as user_service
from .security import TokenError, decode_token

http_bearer = HTTPBearer(auto_error=False)


def client_info(request: Request) -> tuple[str | None, str | None]:
    client_ip = request.client.host if request.client else None
    return client_ip, request.headers.get("user-agent")


async def get_current_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
    redis: Redis = Depends(get_redis),
) -> dict:
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="인증 정보가 필요합니다.")

    payload = decode_token(credentials.credentials, expected_type="access")
    await session_service.validate_access(redis, payload)
    client_ip, user_agent = client_info(request)
    await session_service.touch(redis, payload["session_id"], ip=client_ip, user_agent=user_agent)
    return payload


async def get_current_user(
    payload: dict = Depends(get_current_token),
    db: AsyncSession = Depends(get_db),
) -> UserPublic:
    user = await user_service.get_user_by_id(db, payload["sub"])
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="사용자를 찾을 수 없습니다.")
    return user_service.user_to_public(user)


def check_admin(current_user: UserPublic = Depends(get_current_user)) -> UserPublic:
    """관리자 권한 확인 (ADMIN_EMAILS 에 등록된 이메일만 허용)"""
    if not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="관리자 권한이 필요합니다.")
    return current_user
