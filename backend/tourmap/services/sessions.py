"""
로그인 세션 관리 (Redis)

세션 하나는 해시 ``tourmap:session:<id>`` 에 저장되고,
사용자별 세션 목록은 셋 ``tourmap:user-sessions:<user_id>`` 로 관리한다.
리프레시 토큰은 jti 키가 살아 있는 동안만 한 번 교환할 수 있다.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import uuid4

from redis.asyncio import Redis

from ..core.config import settings
from ..core.security import TokenError, create_access_token, create_refresh_token, decode_token

SESSION_KEY_PREFIX = "tourmap:session:"
USER_SESSIONS_PREFIX = "tourmap:user-sessions:"
REFRESH_KEY_PREFIX = "tourmap:refresh:"


@dataclass
class IssuedTokens:
    access_token: str
    refresh_token: str
    session_id: str


def _session_key(session_id: str) -> str:
    return f"{SESSION_KEY_PREFIX}{session_id}"


def _user_sessions_key(user_id: str) -> str:
    return f"{USER_SESSIONS_PREFIX}{user_id}"


def _refresh_key(jti: str) -> str:
    return f"{REFRESH_KEY_PREFIX}{jti}"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def session_ttl() -> int:
    return max(
        settings.refresh_token_expire_minutes * 60,
        settings.access_token_expire_minutes * 60,
        settings.mobile_token_expire_days * 24 * 3600,
        3600,
    )


async def _save(redis: Redis, session_id: str, user_id: str, fields: dict[str, Any]) -> None:
    ttl = session_ttl()
    key = _session_key(session_id)
    # Redis 해시에는 None 을 넣을 수 없음
    await redis.hset(key, mapping={k: v for k, v in fields.items() if v is not None})
    await redis.expire(key, ttl)
    await redis.sadd(_user_sessions_key(user_id), session_id)
    await redis.expire(_user_sessions_key(user_id), ttl)


async def get_session(redis: Redis, session_id: str) -> dict[str, Any] | None:
    session = await redis.hgetall(_session_key(session_id))
    return session or None


async def issue_tokens(
    redis: Redis,
    user_id: str,
    *,
    provider: str,
    ip: str | None = None,
    user_agent: str | None = None,
    access_lifetime: timedelta | None = None,
    extra_claims: dict[str, Any] | None = None,
) -> IssuedTokens:
    """새 세션을 열고 액세스/리프레시 토큰을 발급한다."""
    session_id = uuid4().hex
    claims = {**(extra_claims or {}), "session_id": session_id}
    access_token, access_jti = create_access_token(user_id, extra=claims, expires_delta=access_lifetime)
    refresh_token, refresh_jti = create_refresh_token(user_id, extra={"session_id": session_id})

    await redis.set(_refresh_key(refresh_jti), user_id, ex=settings.refresh_token_expire_minutes * 60)
    now = _now_iso()
    await _save(
        redis,
        session_id,
        user_id,
        {
            "session_id": session_id,
            "user_id": user_id,
            "provider": provider,
            "status": "active",
            "created_at": now,
            "updated_at": now,
            "last_seen": now,
            "access_jti": access_jti,
            "refresh_jti": refresh_jti,
            "ip": ip,
            "user_agent": user_agent,
        },
    )
    return IssuedTokens(access_token=access_token, refresh_token=refresh_token, session_id=session_id)


async def validate_access(redis: Redis, payload: dict[str, Any]) -> dict[str, Any]:
    """디코딩된 액세스 토큰이 살아 있는 세션의 현재 토큰인지 확인한다."""
    session_id = payload.get("session_id")
    if not session_id:
        raise TokenError(detail="세션 정보가 없습니다.")
    session = await get_session(redis, session_id)
    if session is None or session.get("status") != "active":
        raise TokenError(detail="세션이 만료되었거나 로그아웃되었습니다.")
    if session.get("access_jti") != payload.get("jti"):
        raise TokenError(detail="만료된 토큰입니다.")
    return session


async def touch(redis: Redis, session_id: str, *, ip: str | None = None, user_agent: str | None = None) -> None:
    session = await get_session(redis, session_id)
    if session is None:
        return
    await _save(
        redis,
        session_id,
        session["user_id"],
        {"last_seen": _now_iso(), "ip": ip, "user_agent": user_agent},
    )


async def rotate(redis: Redis, refresh_token: str) -> IssuedTokens:
    """리프레시 토큰을 한 번 쓰고 버린 뒤 같은 세션에 새 토큰 쌍을 발급한다."""
    payload = decode_token(refresh_token, expected_type="refresh")
    session_id = payload.get("session_id")
    jti = payload.get("jti")
    if not session_id or not jti:
        raise TokenError(detail="세션 정보가 없습니다.")
    if not await redis.exists(_refresh_key(jti)):
        raise TokenError(detail="만료되었거나 취소된 리프레시 토큰입니다.")

    session = await get_session(redis, session_id)
    if session is None or session.get("status") != "active":
        raise TokenError(detail="세션이 만료되었거나 존재하지 않습니다.")
    if session.get("refresh_jti") != jti:
        raise TokenError(detail="토큰이 교체되었습니다. 다시 로그인해 주세요.")

    await redis.delete(_refresh_key(jti))

    user_id = payload["sub"]
    access_token, access_jti = create_access_token(user_id, extra={"session_id": session_id})
    new_refresh_token, new_refresh_jti = create_refresh_token(user_id, extra={"session_id": session_id})
    await redis.set(_refresh_key(new_refresh_jti), user_id, ex=settings.refresh_token_expire_minutes * 60)
    await _save(
        redis,
        session_id,
        user_id,
        {"access_jti": access_jti, "refresh_jti": new_refresh_jti, "updated_at": _now_iso()},
    )
    return IssuedTokens(access_token=access_token, refresh_token=new_refresh_token, session_id=session_id)


async def revoke(redis: Redis, session_id: str, *, reason: str | None = None) -> dict[str, Any] | None:
    session = await get_session(redis, session_id)
    if session is None:
        return None
    refresh_jti = session.get("refresh_jti")
    if refresh_jti:
        await redis.delete(_refresh_key(refresh_jti))
    await _save(
        redis,
        session_id,
        session["user_id"],
        {"status": "revoked", "revoked_at": _now_iso(), "revoked_reason": reason},
    )
    session["status"] = "revoked"
    return session


async def list_sessions(redis: Redis, user_id: str) -> list[dict[str, Any]]:
    key = _user_sessions_key(user_id)
    sessions: list[dict[str, Any]] = []
    for session_id in await redis.smembers(key):
        session = await get_session(redis, session_id)
        if session is None:
            await redis.srem(key, session_id)
            continue
        sessions.append(session)
    return sorted(sessions, key=lambda s: s.get("last_seen", ""), reverse=True)
