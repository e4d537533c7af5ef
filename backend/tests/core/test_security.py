"""
JWT 발급/검증 테스트
"""
from datetime import timedelta

import jwt
import pytest

from backend.tourmap.core.config import settings
from backend.tourmap.core.security import TokenError, create_access_token, create_refresh_token, decode_token


def test_access_token_claims():
    token, jti = create_access_token("user-1", extra={"session_id": "s-1"})
    payload = decode_token(token, expected_type="access")
    assert payload["sub"] == "user-1"
    assert payload["jti"] == jti
    assert payload["session_id"] == "s-1"
    assert payload["exp"] - payload["iat"] == settings.access_token_expire_minutes * 60


def test_wrong_token_type():
    token, _ = create_refresh_token("user-1")
    with pytest.raises(TokenError) as exc:
        decode_token(token, expected_type="access")
    assert exc.value.status_code == 401


def test_expired_token():
    token, _ = create_access_token("user-1", expires_delta=timedelta(seconds=-1))
    with pytest.raises(TokenError) as exc:
        decode_token(token)
    assert exc.value.detail == "만료된 토큰입니다."


def test_tampered_token():
    forged = jwt.encode({"sub": "user-1", "type": "access"}, "other-secret", algorithm="HS256")
    with pytest.raises(TokenError):
        decode_token(forged)
