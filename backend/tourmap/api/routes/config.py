from typing import Any

from fastapi import APIRouter

from ...core.config import settings
from ...services import oauth as oauth_service

router = APIRouter()


@router.get("/map", summary="프런트 지도 설정")
async def map_config() -> dict[str, Any]:
    return {
        "tileUrl": settings.map_tile_url,
        "attribution": settings.map_attribution,
        "center": {"latitude": settings.map_default_latitude, "longitude": settings.map_default_longitude},
        "zoom": settings.map_default_zoom,
        "defaultRadiusKm": settings.default_search_radius_km,
        "providers": oauth_service.enabled_providers(),
    }
