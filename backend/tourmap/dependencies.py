from collections.abc import AsyncGenerator

from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from .db.engine import DatabaseConnectionManager
from .db.redis import RedisConnectionManager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    # 커밋되지 않은 작업은 세션 종료 시 롤백됨
    async with DatabaseConnectionManager.get_sessionmaker()() as session:
        yield session


async def get_redis() -> AsyncGenerator[Redis, None]:
    yield RedisConnectionManager.get_client()
