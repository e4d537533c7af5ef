from redis.asyncio import Redis

from ..core.config import settings


class RedisConnectionManager:
    """세션/OAuth state 저장용 Redis 클라이언트 싱글톤."""

    client: Redis | None = None

    @classmethod
    def get_client(cls) -> Redis:
        if cls.client is None:
            cls.client = Redis.from_url(
                settings.redis_url,
                encoding="utf-8",
                decode_responses=True,
                health_check_interval=30,
            )
        return cls.client

    @classmethod
    async def ping(cls) -> bool:
        return bool(await cls.get_client().ping())

    @classmethod
    async def close(cls) -> None:
        if cls.client is not None:
            await cls.client.aclose()
            cls.client = None
