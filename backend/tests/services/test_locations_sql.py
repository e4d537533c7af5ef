"""
좌표 SQL 파라미터 테스트 (PostGIS 는 경도, 위도 순서)
"""
import pytest

from backend.tourmap.schemas import GeoPoint
from backend.tourmap.services import locations


@pytest.mark.asyncio
async def test_insert_point_binds_longitude_first(recording_session):
    await locations.insert_point(recording_session, "attr-1", GeoPoint(latitude=39.9, longitude=116.4))

    statement, params = recording_session.executed[0]
    assert "ST_MakePoint(:longitude, :latitude)" in str(statement)
    assert "4326" in str(statement)
    assert params["attraction_id"] == "attr-1"
    assert params["longitude"] == 116.4
    assert params["latitude"] == 39.9
    assert len(params["id"]) == 32


@pytest.mark.asyncio
async def test_replace_point_deletes_then_inserts(recording_session):
    await locations.replace_point(recording_session, "attr-1", GeoPoint(latitude=1, longitude=2))

    statements = [str(statement) for statement, _ in recording_session.executed]
    assert statements[0].startswith("DELETE FROM locations")
    assert "INSERT INTO locations" in statements[1]
    assert recording_session.commits == 0


@pytest.mark.asyncio
async def test_find_within_radius_converts_km_to_metres(recording_session):
    recording_session.queue(
        [
            {"attraction_id": "near", "distance_km": 0.4},
            {"attraction_id": "far", "distance_km": 4.9},
        ]
    )

    distances = await locations.find_within_radius(recording_session, latitude=39.9, longitude=116.4, radius_km=5)

    statement, params = recording_session.executed[0]
    assert "ST_DWithin" in str(statement)
    assert params == {"longitude": 116.4, "latitude": 39.9, "radius_m": 5000}
    assert list(distances) == ["near", "far"]
    assert distances["far"] == 4.9


@pytest.mark.asyncio
async def test_get_points(recording_session):
    recording_session.queue([{"attraction_id": "a", "latitude": 39.9, "longitude": 116.4}])

    points = await locations.get_points(recording_session, ["a", "a", "b"])

    assert recording_session.executed[0][1] == {"attraction_ids": ["a", "b"]}
    assert points == {"a": GeoPoint(latitude=39.9, longitude=116.4)}


@pytest.mark.asyncio
async def test_get_points_skips_query_for_empty_ids(recording_session):
    assert await locations.get_points(recording_session, []) == {}
    assert recording_session.executed == []
