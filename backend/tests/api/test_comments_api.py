"""
댓글 API 테스트
"""
from datetime import datetime, timezone

import httpx
import pytest
from asgi_lifespan import LifespanManager
from fastapi import HTTPException

from backend.tourmap.core.auth import get_current_user
from backend.tourmap.main import app
from backend.tourmap.schemas import CommentAttraction, CommentOut, Page, UserPublic, UserSummary
from backend.tourmap.services import comments as comment_service

NOW = datetime(2024, 5, 1, tzinfo=timezone.utc)


async def _request(method: str, url: str, **kwargs) -> httpx.Response:
    async with LifespanManager(app):
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver") as client:
            response = await client.request(method, url, **kwargs)
            await response.aread()
            return response


def _comment(**overrides) -> CommentOut:
    data = {
        "id": "c-1",
        "content": "좋아요",
        "rating": 5,
        "images": [],
        "created_at": NOW,
        "updated_at": NOW,
        "user": UserSummary(id="user-1", name="여행자"),
        "attraction": CommentAttraction(id="attr-1", name="故宫博物院"),
    }
    data.update(overrides)
    return CommentOut(**data)


@pytest.mark.asyncio
async def test_list_comments(monkeypatch: pytest.MonkeyPatch):
    async def fake_list(db, attraction_id, *, page, limit):
        assert attraction_id == "attr-1"
        return Page.build([_comment()], total=1, page=page, limit=limit)

    monkeypatch.setattr(comment_service, "list_comments", fake_list)

    response = await _request("GET", "/api/attractions/attr-1/comments")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["totalPages"] == 1
    assert data["items"][0]["user"] == {"id": "user-1", "name": "여행자", "image": None}
    assert data["items"][0]["attraction"]["name"] == "故宫博物院"


@pytest.mark.asyncio
async def test_create_comment(monkeypatch: pytest.MonkeyPatch):
    captured = {}

    async def fake_create(db, attraction_id, user_id, payload):
        captured.update(attraction_id=attraction_id, user_id=user_id, payload=payload)
        return _comment(images=[str(url) for url in payload.images])

    monkeypatch.setattr(comment_service, "create_comment", fake_create)
    app.dependency_overrides[get_current_user] = lambda: UserPublic(id="user-1")

    response = await _request(
        "POST",
        "/api/attractions/attr-1/comments",
        json={"content": "다시 가고 싶어요", "rating": 4, "images": ["https://example.com/1.jpg"]},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "comment created"
    assert body["data"]["images"] == ["https://example.com/1.jpg"]
    assert captured["user_id"] == "user-1"
    assert captured["payload"].rating == 4


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"content": "", "rating": 3},
        {"content": "x" * 501, "rating": 3},
        {"content": "ok", "rating": 0},
        {"content": "ok", "rating": 6},
        {"content": "ok", "rating": 3, "images": ["not-a-url"]},
    ],
)
async def test_create_comment_validation(payload):
    app.dependency_overrides[get_current_user] = lambda: UserPublic(id="user-1")
    response = await _request("POST", "/api/attractions/attr-1/comments", json=payload)
    assert response.status_code == 400
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_create_comment_unknown_attraction(monkeypatch: pytest.MonkeyPatch):
    async def fake_create(db, attraction_id, user_id, payload):
        raise HTTPException(status_code=404, detail="관광지를 찾을 수 없습니다.")

    monkeypatch.setattr(comment_service, "create_comment", fake_create)
    app.dependency_overrides[get_current_user] = lambda: UserPublic(id="user-1")

    response = await _request("POST", "/api/attractions/nope/comments", json={"content": "a", "rating": 1})
    assert response.status_code == 404
