from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from ..core.config import settings


class DatabaseConnectionManager:
    engine: AsyncEngine | None = None
    sessionmaker: async_sessionmaker[AsyncSession] | None = None

    @classmethod
    def get_engine(cls) -> AsyncEngine:
        if cls.engine is None:
            cls.engine = create_async_engine(
                settings.database_url,
                echo=settings.database_echo,
                pool_size=settings.database_pool_size,
                pool_pre_ping=True,
            )
        return cls.engine

    @classmethod
    def get_sessionmaker(cls) -> async_sessionmaker[AsyncSession]:
        if cls.sessionmaker is None:
            # 커밋 후에도 응답 직렬화에서 속성을 읽을 수 있도록 만료시키지 않음
            cls.sessionmaker = async_sessionmaker(cls.get_engine(), expire_on_commit=False)
        return cls.sessionmaker

    @classmethod
    async def close(cls) -> None:
        if cls.engine is not None:
            await cls.engine.dispose()
            cls.engine = None
            cls.sessionmaker = None
