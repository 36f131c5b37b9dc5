"""
영속성 협력자 게이트웨이

레이아웃 엔진이 필요로 하는 저장소 호출만 노출한다.
SQLAlchemy 오류는 모두 PersistenceError 로 변환된다.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from brochure.core.exceptions import PersistenceError
from brochure.db.models import Campaign, CampaignProduct, Product
from brochure.db.session import AsyncSessionLocal
from brochure.repositories import CampaignProductRepository, CampaignRepository
from brochure.utils.logger import get_logger

logger = get_logger(__name__)


class BrochurePersistenceGateway:
    """캠페인 / 캠페인-상품 레코드 저장소 접근"""

    def __init__(self, session_factory: async_sessionmaker = AsyncSessionLocal):
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncIterator[AsyncSession]:
        async with self._session_factory() as session:
            try:
                yield session
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(
                    "저장소 작업 실패",
                    exc_info=e,
                    context={"operation": operation, "error": str(e)}
                )
                raise PersistenceError(operation) from e

    async def get_campaign(self, campaign_id: int) -> Optional[Campaign]:
        async with self._session("get_campaign") as session:
            return await CampaignRepository(session).get(campaign_id)

    async def load_campaign_products(self, campaign_id: int) -> List[Tuple[CampaignProduct, Optional[Product]]]:
        async with self._session("load_campaign_products") as session:
            return await CampaignProductRepository(session).get_by_campaign_with_products(campaign_id)

    async def update_campaign_product_position(self, item_id: int, x: float, y: float) -> bool:
        """위치 갱신. 레코드가 없으면 False"""
        async with self._session("update_campaign_product_position") as session:
            record = await CampaignProductRepository(session).update_position(item_id, x, y)
            return record is not None

    async def save_campaign(
        self,
        campaign_fields: Dict[str, Any],
        placements: List[Dict[str, Any]]
    ) -> Tuple[Campaign, List[CampaignProduct]]:
        """캠페인과 상품 배치 스냅샷을 한 트랜잭션으로 생성

        레코드는 placements 순서대로 반환된다. 중간에 실패하면 전부 롤백되어 캠페인이 남지 않는다.
        """
        async with self._session("save_campaign") as session:
            campaign = await CampaignRepository(session).create(commit=False, **campaign_fields)
            repository = CampaignProductRepository(session)
            records = []
            for placement in placements:
                records.append(await repository.create(commit=False, campaign_id=campaign.id, **placement))
            await session.commit()
            await session.refresh(campaign)
            return campaign, records
