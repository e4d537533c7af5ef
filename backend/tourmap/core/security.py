from datetime import datetime, timedelta, timezone
from typing import Any, Literal
from uuid import uuid4

import jwt
from fastapi import HTTPException, status

from .config import settings

TokenType = Literal["access", "refresh"]


class TokenError(HTTPException):
    def __init__(self, detail: str = "토큰이 유효하지 않습니다."):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def _encode(
    subject: str,
    token_type: TokenType,
    expires_delta: timedelta,
    extra: dict[str, Any] | None = None,
) -> tuple[str, str]:
    now = datetime.now(timezone.utc)
    jti = uuid4().hex
    payload: dict[str, Any] = {
        **(extra or {}),
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_delta).timestamp()),
        "type": token_type,
        "jti": jti,
    }
    token = jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    return token, jti


def create_access_token(
    subject: str,
    extra: dict[str, Any] | None = None,
    expires_delta: timedelta | None = None,
) -> tuple[str, str]:
    """액세스 토큰과 jti 를 반환한다. 모바일 토큰은 expires_delta 로 수명을 늘린다."""
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    return _encode(subject, "access", lifetime, extra)


def create_refresh_token(subject: str, extra: dict[str, Any] | None = None) -> tuple[str, str]:
    lifetime = timedelta(minutes=settings.refresh_token_expire_minutes)
    return _encode(subject, "refresh", lifetime, extra)


def decode_token(token: str, expected_type: TokenType | None = None) -> dict[str, Any]:
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError as exc:
        raise TokenError(detail="만료된 토큰입니다.") from exc
    except jwt.PyJWTError as exc:
        raise TokenError(detail="토큰 디코딩에 실패했습니다.") from exc

    if "sub" not in payload:
        raise TokenError(detail="토큰에 subject 정보가 없습니다.")
    if expected_type and payload.get("type") != expected_type:
        raise TokenError(detail=f"{expected_type} 토큰이 아닙니다.")
    return payload
