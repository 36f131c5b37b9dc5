"""
테스트 설정 및 픽스처
인메모리 SQLite(aiosqlite + StaticPool) 로 저장소/게이트웨이/API 를 구동한다
"""

import os

# 설정 로드 전에 지정
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SEED_DEMO_DATA", "false")

from typing import AsyncIterator, Iterable, Optional, Tuple

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from brochure.api.deps import get_db, get_editor_manager
from brochure.db.models import CampaignProduct, Product
from brochure.db.seed import seed_demo_data
from brochure.db.session import init_models
from brochure.main import app
from brochure.services.brochure_editor_service import EditorSessionManager
from brochure.services.brochure_persistence import BrochurePersistenceGateway


@pytest.fixture
async def engine():
    """테스트용 인메모리 엔진 (테스트마다 새로 생성)"""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await init_models(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def seeded(db_session) -> AsyncSession:
    """데모 사용자(id=1)/상품 4개/캠페인 3개"""
    await seed_demo_data(db_session)
    return db_session


@pytest.fixture
def gateway(session_factory) -> BrochurePersistenceGateway:
    return BrochurePersistenceGateway(session_factory)


@pytest.fixture
async def editor_manager(gateway) -> AsyncIterator[EditorSessionManager]:
    manager = EditorSessionManager(gateway)
    yield manager
    await manager.shutdown()


@pytest.fixture
async def client(session_factory, editor_manager) -> AsyncIterator[AsyncClient]:
    """의존성을 테스트 DB / 세션 관리자로 교체한 API 클라이언트"""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_editor_manager] = lambda: editor_manager

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()


class FakeGateway:
    """저장소 호출을 기록하는 게이트웨이 대역"""

    def __init__(self, records: Iterable[Tuple[CampaignProduct, Optional[Product]]] = ()):
        self.records = list(records)
        self.position_updates = []
        self.saved = []
        self.fail_with = None

    async def get_campaign(self, campaign_id):
        return None

    async def load_campaign_products(self, campaign_id):
        return list(self.records)

    async def update_campaign_product_position(self, item_id, x, y):
        if self.fail_with is not None:
            raise self.fail_with
        self.position_updates.append((item_id, x, y))
        return True

    async def save_campaign(self, campaign_fields, placements):
        if self.fail_with is not None:
            raise self.fail_with
        self.saved.append((campaign_fields, placements))

        class _Campaign:
            id = 99

        # 레코드 id 는 100 부터 placements 순서대로
        records = [CampaignProduct(id=100 + index, **placement) for index, placement in enumerate(placements)]
        return _Campaign(), records


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()
