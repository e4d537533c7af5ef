import logging
from datetime import timedelta

from fastapi import APIRouter, Cookie, Depends, HTTPException, Request, Response, status
from fastapi.responses import RedirectResponse
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import ValidationError
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.auth import client_info, get_current_token, get_current_user, http_bearer
from ...core.config import settings
from ...core.security import TokenError, decode_token
from ...dependencies import get_db, get_redis
from ...schemas import (
    LoginResponse,
    MobileAuthRequest,
    MobileAuthResponse,
    MobileUser,
    RefreshResponse,
    SessionInfo,
    UserPublic,
)
from ...services import oauth as oauth_service
from ...services import sessions as session_service
from ...services import users as user_service

logger = logging.getLogger(__name__)

REFRESH_COOKIE = "refresh_token"

router = APIRouter()


def _cookie_path() -> str:
    return f"{settings.api_prefix}/auth"


def _set_refresh_cookie(response: Response, refresh_token: str) -> None:
    response.set_cookie(
        key=REFRESH_COOKIE,
        value=refresh_token,
        httponly=True,
        secure=False,
        samesite="lax",
        max_age=settings.refresh_token_expire_minutes * 60,
        path=_cookie_path(),
    )


@router.get("/providers", summary="사용 가능한 로그인 공급자")
async def providers() -> dict[str, list[str]]:
    return {"providers": oauth_service.enabled_providers()}


@router.get("/{provider}/login", summary="OAuth 로그인 시작", status_code=status.HTTP_307_TEMPORARY_REDIRECT)
async def oauth_login(provider: str, redis: Redis = Depends(get_redis)) -> RedirectResponse:
    oauth_provider = oauth_service.get_provider(provider)
    url = await oauth_service.create_authorization_url(redis, oauth_provider)
    return RedirectResponse(url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)


@router.get("/{provider}/callback", response_model=LoginResponse, summary="OAuth 콜백")
async def oauth_callback(
    provider: str,
    request: Request,
    response: Response,
    code: str | None = None,
    state: str | None = None,
    db: AsyncSession = Depends(get_db),
    redis: Redis = Depends(get_redis),
) -> LoginResponse:
    oauth_provider = oauth_service.get_provider(provider)
    await oauth_service.consume_state(redis, oauth_provider, state)
    if not code:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="인가 코드가 없습니다.")

    profile = await oauth_service.fetch_profile(oauth_provider, code)
    user = await user_service.upsert_oauth_user(db, profile)

    client_ip, user_agent = client_info(request)
    tokens = await session_service.issue_tokens(
        redis, user.id, provider=provider, ip=client_ip, user_agent=user_agent
    )
    _set_refresh_cookie(response, tokens.refresh_token)
    logger.info("OAuth 로그인: user=%s provider=%s", user.id, provider)
    return LoginResponse(access_token=tokens.access_token, user=user_service.user_to_public(user))


@router.post("/mobile", response_model=MobileAuthResponse, summary="모바일 앱 로그인")
async def mobile_login(
    request: Request,
    db: AsyncSession = Depends(get_db),
    redis: Redis = Depends(get_redis),
) -> MobileAuthResponse:
    """
    모바일 앱 로그인

    앱이 공급자 로그인을 마친 뒤 이메일과 공급자 계정 ID 를 넘기면
    사용자를 찾거나 만들고 장기 액세스 토큰을 발급한다.
    실패 사유와 관계없이 401 로 응답한다.
    """
    try:
        payload = MobileAuthRequest.model_validate(await request.json())
        user = await user_service.find_or_create_mobile_user(
            db, email=payload.email, provider=payload.provider, provider_id=payload.provider_id
        )
        client_ip, user_agent = client_info(request)
        tokens = await session_service.issue_tokens(
            redis,
            user.id,
            provider=payload.provider,
            ip=client_ip,
            user_agent=user_agent,
            access_lifetime=timedelta(days=settings.mobile_token_expire_days),
            extra_claims={"id": user.id, "email": user.email},
        )
    except (ValidationError, ValueError, HTTPException) as exc:
        logger.warning("모바일 로그인 거부: %s", exc)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication failed") from exc
    except Exception as exc:
        logger.exception("모바일 로그인 처리 중 오류")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication failed") from exc

    return MobileAuthResponse(
        token=tokens.access_token,
        user=MobileUser(id=user.id, email=user.email, name=user.name, image=user.image),
    )


@router.post("/refresh", response_model=RefreshResponse)
async def refresh(
    request: Request,
    response: Response,
    refresh_token: str | None = Cookie(default=None, alias=REFRESH_COOKIE),
    redis: Redis = Depends(get_redis),
) -> RefreshResponse:
    if not refresh_token:
        raise TokenError(detail="리프레시 토큰이 없습니다.")

    tokens = await session_service.rotate(redis, refresh_token)
    client_ip, user_agent = client_info(request)
    await session_service.touch(redis, tokens.session_id, ip=client_ip, user_agent=user_agent)
    _set_refresh_cookie(response, tokens.refresh_token)
    return RefreshResponse(access_token=tokens.access_token)


@router.post("/logout")
async def logout(
    response: Response,
    refresh_token: str | None = Cookie(default=None, alias=REFRESH_COOKIE),
    redis: Redis = Depends(get_redis),
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
) -> dict:
    session_id: str | None = None
    for token, token_type in ((refresh_token, "refresh"), (credentials.credentials if credentials else None, "access")):
        if session_id or not token:
            continue
        try:
            session_id = decode_token(token, expected_type=token_type).get("session_id")
        except TokenError:
            session_id = None

    response.delete_cookie(key=REFRESH_COOKIE, path=_cookie_path())
    if session_id:
        await session_service.revoke(redis, session_id, reason="logout")
    return {"message": "로그아웃되었습니다."}


@router.get("/sessions", response_model=list[SessionInfo])
async def list_sessions(
    token_payload: dict = Depends(get_current_token),
    redis: Redis = Depends(get_redis),
) -> list[SessionInfo]:
    current_session_id = token_payload.get("session_id")
    sessions = await session_service.list_sessions(redis, token_payload["sub"])
    return [
        SessionInfo(
            session_id=session["session_id"],
            status=session.get("status", "unknown"),
            provider=session.get("provider"),
            created_at=session.get("created_at"),
            last_seen=session.get("last_seen"),
            ip=session.get("ip"),
            user_agent=session.get("user_agent"),
            is_current=session["session_id"] == current_session_id,
        )
        for session in sessions
    ]


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def revoke_session(
    session_id: str,
    token_payload: dict = Depends(get_current_token),
    redis: Redis = Depends(get_redis),
) -> Response:
    session = await session_service.get_session(redis, session_id)
    if session is None or session.get("user_id") != token_payload["sub"]:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="세션을 찾을 수 없습니다.")
    await session_service.revoke(redis, session_id, reason="user_revoked")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=UserPublic)
async def me(current_user: UserPublic = Depends(get_current_user)) -> UserPublic:
    return current_user
