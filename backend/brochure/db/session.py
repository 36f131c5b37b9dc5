from typing import AsyncGenerator, Any, Dict

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker

from brochure.core.config import settings
from brochure.db.base import Base


def _engine_options(database_url: str) -> Dict[str, Any]:
    # SQLite 드라이버는 풀 크기 옵션을 받지 않는다
    if database_url.startswith("sqlite"):
        return {"echo": False}
    return {
        "echo": settings.DEBUG,
        "pool_pre_ping": True,
        "pool_size": 10,
        "max_overflow": 20,
    }


engine = create_async_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

# 비동기 세션
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_models(bind: AsyncEngine = engine) -> None:
    """모든 테이블 생성 (마이그레이션 도구 없이 create_all)"""
    # 메타데이터 등록을 위해 모델 모듈 로드
    import brochure.db.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
