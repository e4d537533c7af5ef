"""
OAuth 2.0 authorization-code 로그인 (Google, GitHub)

1. /auth/{provider}/login 에서 state 를 Redis 에 저장하고 공급자 동의 화면으로 보냄
2. /auth/{provider}/callback 에서 state 를 한 번만 소비하고 code 를 토큰으로 교환
3. 토큰으로 프로필을 조회해 OAuthProfile 로 정규화
"""

from __future__ import annotations

import logging
import secrets
import time
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlencode

import httpx
from fastapi import HTTPException, status
from redis.asyncio import Redis

from ..core.config import settings

logger = logging.getLogger(__name__)

STATE_KEY_PREFIX = "tourmap:oauth-state:"
HTTP_TIMEOUT = 10.0


@dataclass(frozen=True)
class OAuthProvider:
    name: str
    authorize_url: str
    token_url: str
    userinfo_url: str
    scopes: tuple[str, ...]
    client_id: str = ""
    client_secret: str = ""
    extra_authorize_params: dict[str, str] = field(default_factory=dict)

    @property
    def enabled(self) -> bool:
        return bool(self.client_id and self.client_secret)


@dataclass
class OAuthProfile:
    provider: str
    provider_account_id: str
    email: str | None
    name: str | None = None
    image: str | None = None
    email_verified: bool = False
    access_token: str | None = None
    refresh_token: str | None = None
    expires_at: int | None = None


def _providers() -> dict[str, OAuthProvider]:
    return {
        "google": OAuthProvider(
            name="google",
            authorize_url="https://accounts.google.com/o/oauth2/v2/auth",
            token_url="https://oauth2.googleapis.com/token",
            userinfo_url="https://openidconnect.googleapis.com/v1/userinfo",
            scopes=("openid", "email", "profile"),
            client_id=settings.google_client_id,
            client_secret=settings.google_client_secret,
            extra_authorize_params={"access_type": "offline", "prompt": "consent"},
        ),
        "github": OAuthProvider(
            name="github",
            authorize_url="https://github.com/login/oauth/authorize",
            token_url="https://github.com/login/oauth/access_token",
            userinfo_url="https://api.github.com/user",
            scopes=("read:user", "user:email"),
            client_id=settings.github_client_id,
            client_secret=settings.github_client_secret,
        ),
    }


def get_provider(name: str) -> OAuthProvider:
    provider = _providers().get(name)
    if provider is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="지원하지 않는 로그인 공급자입니다.")
    if not provider.enabled:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"{name} 로그인이 설정되지 않았습니다.",
        )
    return provider


def enabled_providers() -> list[str]:
    return [name for name, provider in _providers().items() if provider.enabled]


def callback_url(provider: OAuthProvider) -> str:
    base = settings.oauth_redirect_base_url.rstrip("/")
    return f"{base}{settings.api_prefix}/auth/{provider.name}/callback"


def _state_key(state: str) -> str:
    return f"{STATE_KEY_PREFIX}{state}"


async def create_authorization_url(redis: Redis, provider: OAuthProvider) -> str:
    state = secrets.token_urlsafe(24)
    await redis.set(_state_key(state), provider.name, ex=settings.oauth_state_ttl_seconds)
    params = {
        "client_id": provider.client_id,
        "redirect_uri": callback_url(provider),
        "response_type": "code",
        "scope": " ".join(provider.scopes),
        "state": state,
        **provider.extra_authorize_params,
    }
    return f"{provider.authorize_url}?{urlencode(params)}"


async def consume_state(redis: Redis, provider: OAuthProvider, state: str | None) -> None:
    """state 는 한 번만 쓸 수 있고 발급한 공급자와 같아야 한다."""
    stored = await redis.getdel(_state_key(state)) if state else None
    if stored != provider.name:
        logger.warning("OAuth state 불일치: provider=%s", provider.name)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="유효하지 않은 로그인 요청입니다.")


def parse_profile(provider: str, data: dict[str, Any], tokens: dict[str, Any]) -> OAuthProfile:
    """공급자별 사용자 정보 응답을 공통 형태로 변환"""
    expires_in = tokens.get("expires_in")
    common = {
        "provider": provider,
        "access_token": tokens.get("access_token"),
        "refresh_token": tokens.get("refresh_token"),
        "expires_at": int(time.time()) + int(expires_in) if expires_in else None,
    }
    if provider == "google":
        return OAuthProfile(
            provider_account_id=str(data["sub"]),
            email=data.get("email"),
            name=data.get("name"),
            image=data.get("picture"),
            email_verified=bool(data.get("email_verified")),
            **common,
        )
    return OAuthProfile(
        provider_account_id=str(data["id"]),
        email=data.get("email"),
        name=data.get("name") or data.get("login"),
        image=data.get("avatar_url"),
        email_verified=False,
        **common,
    )


def primary_github_email(emails: list[dict[str, Any]]) -> str | None:
    for entry in emails:
        if entry.get("primary") and entry.get("verified"):
            return entry.get("email")
    return None


async def _exchange_code(client: httpx.AsyncClient, provider: OAuthProvider, code: str) -> dict[str, Any]:
    response = await client.post(
        provider.token_url,
        data={
            "client_id": provider.client_id,
            "client_secret": provider.client_secret,
            "code": code,
            "grant_type": "authorization_code",
            "redirect_uri": callback_url(provider),
        },
        headers={"Accept": "application/json"},
    )
    response.raise_for_status()
    tokens = response.json()
    if "access_token" not in tokens:
        # GitHub 은 잘못된 code 에도 200 과 error 필드를 돌려줌
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=tokens.get("error_description") or "인가 코드가 유효하지 않습니다.",
        )
    return tokens


async def fetch_profile(
    provider: OAuthProvider,
    code: str,
    client: httpx.AsyncClient | None = None,
) -> OAuthProfile:
    owns_client = client is None
    client = client or httpx.AsyncClient(timeout=HTTP_TIMEOUT)
    try:
        tokens = await _exchange_code(client, provider, code)
        headers = {"Authorization": f"Bearer {tokens['access_token']}", "Accept": "application/json"}
        response = await client.get(provider.userinfo_url, headers=headers)
        response.raise_for_status()
        profile = parse_profile(provider.name, response.json(), tokens)

        if provider.name == "github" and not profile.email:
            emails = await client.get(f"{provider.userinfo_url}/emails", headers=headers)
            emails.raise_for_status()
            profile.email = primary_github_email(emails.json())
            profile.email_verified = profile.email is not None
    except (httpx.HTTPError, ValueError, KeyError) as exc:
        logger.error("OAuth 공급자 통신 실패 (%s): %s", provider.name, exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="로그인 공급자와 통신하지 못했습니다.",
        ) from exc
    finally:
        if owns_client:
            await client.aclose()

    if not profile.email:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="이메일 정보를 가져올 수 없습니다.")
    return profile
