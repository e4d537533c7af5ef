"""
관광지 초기 데이터 삽입 스크립트

시드 사용자 소유로 베이징 주요 관광지를 좌표와 함께 등록한다.
같은 이름의 관광지가 이미 있으면 내용과 좌표를 갱신한다.
"""

import asyncio
import sys
from pathlib import Path

# 프로젝트 루트를 Python 경로에 추가
project_root = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(project_root))

from sqlalchemy import select

from backend.tourmap.core.config import settings
from backend.tourmap.db import init as db_init
from backend.tourmap.db.engine import DatabaseConnectionManager
from backend.tourmap.db.models import Attraction, User, utcnow
from backend.tourmap.schemas import AttractionCreate, GeoPoint
from backend.tourmap.services import attractions as attraction_service
from backend.tourmap.services import locations

SEED_USER_EMAIL = "seed@tourmap.local"

ATTRACTIONS = [
    {
        "name": "故宫博物院",
        "description": "명·청 두 왕조의 황궁. 세계 최대 규모의 목조 궁전 건축군입니다.",
        "address": "景山前街4号",
        "city": "北京",
        "province": "北京",
        "country": "中国",
        "category": "역사",
        "price": 60,
        "opening_hours": "08:30-17:00 (월요일 휴관)",
        "latitude": 39.9163,
        "longitude": 116.3972,
    },
    {
        "name": "天坛公园",
        "description": "황제가 풍년을 기원하던 제단. 기년전과 회음벽이 유명합니다.",
        "address": "天坛东里甲1号",
        "city": "北京",
        "province": "北京",
        "country": "中国",
        "category": "역사",
        "price": 15,
        "opening_hours": "06:00-22:00",
        "latitude": 39.8822,
        "longitude": 116.4066,
    },
    {
        "name": "颐和园",
        "description": "곤명호와 만수산을 중심으로 한 황실 정원입니다.",
        "address": "新建宫门路19号",
        "city": "北京",
        "province": "北京",
        "country": "中国",
        "category": "정원",
        "price": 30,
        "opening_hours": "06:30-18:00",
        "latitude": 39.9999,
        "longitude": 116.2755,
    },
    {
        "name": "八达岭长城",
        "description": "가장 잘 보존된 만리장성 구간 중 하나입니다.",
        "address": "延庆区G6京藏高速58号出口",
        "city": "北京",
        "province": "北京",
        "country": "中国",
        "category": "자연",
        "price": 40,
        "opening_hours": "07:30-16:00",
        "latitude": 40.3599,
        "longitude": 116.0200,
    },
    {
        "name": "南锣鼓巷",
        "description": "후퉁 골목을 따라 카페와 상점이 늘어선 거리입니다.",
        "address": "东城区南锣鼓巷",
        "city": "北京",
        "province": "北京",
        "country": "中国",
        "category": "거리",
        "price": 0,
        "latitude": 39.9371,
        "longitude": 116.4033,
    },
]


async def _seed_user(db) -> User:
    user = await db.scalar(select(User).where(User.email == SEED_USER_EMAIL))
    if user is None:
        user = User(email=SEED_USER_EMAIL, name="Tour Map")
        db.add(user)
        await db.commit()
    return user


async def seed_attractions():
    """관광지 초기 데이터 삽입"""
    engine = DatabaseConnectionManager.get_engine()
    if settings.auto_create_schema:
        await db_init.ensure_schema(engine)

    print("관광지 초기 데이터 삽입을 시작합니다...")

    async with DatabaseConnectionManager.get_sessionmaker()() as db:
        user = await _seed_user(db)

        for data in ATTRACTIONS:
            fields = dict(data)
            point = GeoPoint(latitude=fields.pop("latitude"), longitude=fields.pop("longitude"))

            existing = await db.scalar(select(Attraction).where(Attraction.name == data["name"]))
            if existing:
                for key, value in fields.items():
                    setattr(existing, key, value)
                existing.updated_at = utcnow()
                await locations.replace_point(db, existing.id, point)
                await db.commit()
                print(f"  ✓ {data['name']}: 업데이트 완료 (ID: {existing.id})")
                continue

            payload = AttractionCreate(**fields, location={"geo": point})
            created = await attraction_service.create_attraction(db, user.id, payload)
            print(f"  ✓ {data['name']}: 생성 완료 (ID: {created.id})")

    await DatabaseConnectionManager.close()
    print(f"\n총 {len(ATTRACTIONS)}개의 관광지가 준비되었습니다.")


if __name__ == "__main__":
    asyncio.run(seed_attractions())
