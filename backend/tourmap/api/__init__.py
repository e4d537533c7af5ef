from fastapi import APIRouter

from .routes import admin, attractions, auth, comments, config, health, rankings, user_attractions

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(config.router, prefix="/config", tags=["config"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
# /attractions/ranking(s) 가 /attractions/{attraction_id} 보다 먼저 매칭되어야 함
api_router.include_router(rankings.router, prefix="/attractions", tags=["rankings"])
api_router.include_router(attractions.router, prefix="/attractions", tags=["attractions"])
api_router.include_router(comments.router, prefix="/attractions", tags=["comments"])
api_router.include_router(user_attractions.router, prefix="/user", tags=["user"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
