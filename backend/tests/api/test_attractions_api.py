"""
관광지 API 테스트 (서비스 계층은 monkeypatch)
"""
from datetime import datetime, timezone

import httpx
import pytest
from asgi_lifespan import LifespanManager
from fastapi import HTTPException

from backend.tourmap.core.auth import get_current_user
from backend.tourmap.main import app
from backend.tourmap.schemas import AttractionOut, GeoPoint, LocationPayload, Page, UserPublic
from backend.tourmap.services import attractions as attraction_service
from backend.tourmap.services import user_attractions as user_attraction_service

NOW = datetime(2024, 5, 1, tzinfo=timezone.utc)
USER = UserPublic(id="user-1", name="여행자", email="traveler@example.com")


async def _request(method: str, url: str, **kwargs) -> httpx.Response:
    async with LifespanManager(app):
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver") as client:
            response = await client.request(method, url, **kwargs)
            await response.aread()
            return response


def _attraction(**overrides) -> AttractionOut:
    data = {
        "id": "attr-1",
        "name": "故宫博物院",
        "description": "황궁",
        "created_at": NOW,
        "updated_at": NOW,
        "location": LocationPayload(geo=GeoPoint(latitude=39.9163, longitude=116.3972)),
    }
    data.update(overrides)
    return AttractionOut(**data)


def _sign_in() -> None:
    app.dependency_overrides[get_current_user] = lambda: USER


@pytest.mark.asyncio
@pytest.mark.smoke
async def test_list_attractions_envelope(monkeypatch: pytest.MonkeyPatch):
    """목록은 success/data 봉투와 페이지 정보를 camelCase 로 반환"""
    captured = {}

    async def fake_list(db, **kwargs):
        captured.update(kwargs)
        return Page.build([_attraction()], total=11, page=kwargs["page"], limit=kwargs["limit"])

    monkeypatch.setattr(attraction_service, "list_attractions", fake_list)

    response = await _request("GET", "/api/attractions", params={"page": 2, "limit": 5, "minPrice": 10, "q": "宫"})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["total"] == 11
    assert body["data"]["totalPages"] == 3
    item = body["data"]["items"][0]
    assert item["_count"] == {"visitedBy": 0, "wantToVisitBy": 0}
    assert item["location"]["geo"] == {"latitude": 39.9163, "longitude": 116.3972}
    assert captured["page"] == 2 and captured["limit"] == 5
    assert captured["filters"].min_price == 10
    assert captured["filters"].q == "宫"
    assert captured["radius_km"] is None


@pytest.mark.asyncio
async def test_list_attractions_proximity_uses_default_radius(monkeypatch: pytest.MonkeyPatch):
    captured = {}

    async def fake_list(db, **kwargs):
        captured.update(kwargs)
        return Page.build([_attraction(distance_km=1.2)], total=1, page=1, limit=10)

    monkeypatch.setattr(attraction_service, "list_attractions", fake_list)

    response = await _request("GET", "/api/attractions", params={"lat": 39.9, "lng": 116.4})
    assert response.status_code == 200
    assert captured["latitude"] == 39.9
    assert captured["longitude"] == 116.4
    assert captured["radius_km"] == 5.0
    assert response.json()["data"]["items"][0]["distanceKm"] == 1.2


@pytest.mark.asyncio
async def test_list_attractions_requires_both_coordinates():
    response = await _request("GET", "/api/attractions", params={"lat": 39.9})
    assert response.status_code == 400
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_list_attractions_invalid_limit_is_400():
    response = await _request("GET", "/api/attractions", params={"limit": 0})
    assert response.status_code == 400
    assert "limit" in response.json()["error"]


@pytest.mark.asyncio
async def test_get_attraction_not_found(monkeypatch: pytest.MonkeyPatch):
    async def fake_get(db, attraction_id):
        raise HTTPException(status_code=404, detail="관광지를 찾을 수 없습니다.")

    monkeypatch.setattr(attraction_service, "get_attraction", fake_get)

    response = await _request("GET", "/api/attractions/missing")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "관광지를 찾을 수 없습니다."}


@pytest.mark.asyncio
async def test_create_attraction_requires_sign_in():
    response = await _request("POST", "/api/attractions", json={"name": "x", "description": "y"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_attraction(monkeypatch: pytest.MonkeyPatch):
    captured = {}

    async def fake_create(db, user_id, payload):
        captured["user_id"] = user_id
        captured["payload"] = payload
        return _attraction(name=payload.name)

    monkeypatch.setattr(attraction_service, "create_attraction", fake_create)
    _sign_in()

    response = await _request(
        "POST",
        "/api/attractions",
        json={
            "name": "天坛公园",
            "description": "제단",
            "images": ["https://example.com/a.jpg"],
            "price": 15,
            "website": "",
            "location": {"geo": {"latitude": 39.88, "longitude": 116.40}},
        },
    )
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "created"
    assert body["data"]["name"] == "天坛公园"
    assert captured["user_id"] == "user-1"
    assert captured["payload"].website is None
    assert captured["payload"].location.geo.longitude == 116.40


@pytest.mark.asyncio
async def test_create_attraction_validation_errors():
    _sign_in()
    response = await _request(
        "POST",
        "/api/attractions",
        json={
            "name": "",
            "description": "d",
            "price": -1,
            "location": {"geo": {"latitude": 120, "longitude": 0}},
        },
    )
    assert response.status_code == 400
    error = response.json()["error"]
    assert "name" in error
    assert "price" in error
    assert "latitude" in error


@pytest.mark.asyncio
async def test_update_forbidden_for_other_user(monkeypatch: pytest.MonkeyPatch):
    async def fake_update(db, attraction_id, user, payload):
        raise HTTPException(status_code=403, detail="이 관광지를 수정할 권한이 없습니다.")

    monkeypatch.setattr(attraction_service, "update_attraction", fake_update)
    _sign_in()

    response = await _request("PUT", "/api/attractions/attr-1", json={"price": 20})
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_update_attraction_passes_only_given_fields(monkeypatch: pytest.MonkeyPatch):
    captured = {}

    async def fake_update(db, attraction_id, user, payload):
        captured["fields"] = payload.model_dump(exclude_unset=True)
        return _attraction(price=20)

    monkeypatch.setattr(attraction_service, "update_attraction", fake_update)
    _sign_in()

    response = await _request("PUT", "/api/attractions/attr-1", json={"price": 20, "openingHours": "09:00-18:00"})
    assert response.status_code == 200
    assert captured["fields"] == {"price": 20, "opening_hours": "09:00-18:00"}


@pytest.mark.asyncio
async def test_delete_attraction(monkeypatch: pytest.MonkeyPatch):
    deleted = []

    async def fake_delete(db, attraction_id, user):
        deleted.append((attraction_id, user.id))

    monkeypatch.setattr(attraction_service, "delete_attraction", fake_delete)
    _sign_in()

    response = await _request("DELETE", "/api/attractions/attr-1")
    assert response.status_code == 200
    assert response.json()["data"] is None
    assert deleted == [("attr-1", "user-1")]


@pytest.mark.asyncio
async def test_patch_action_marks_and_returns_attraction(monkeypatch: pytest.MonkeyPatch):
    marks = []

    async def fake_mark(db, user_id, attraction_id, mark_type):
        marks.append((user_id, attraction_id, mark_type))

    async def fake_get(db, attraction_id):
        return _attraction(counts={"visited_by": 1, "want_to_visit_by": 0})

    monkeypatch.setattr(user_attraction_service, "mark_attraction", fake_mark)
    monkeypatch.setattr(attraction_service, "get_attraction", fake_get)
    _sign_in()

    response = await _request("PATCH", "/api/attractions/attr-1", json={"action": "visit"})
    assert response.status_code == 200
    assert response.json()["data"]["_count"]["visitedBy"] == 1
    assert marks == [("user-1", "attr-1", "visited")]


@pytest.mark.asyncio
async def test_patch_unknown_action_is_400():
    _sign_in()
    response = await _request("PATCH", "/api/attractions/attr-1", json={"action": "like"})
    assert response.status_code == 400
