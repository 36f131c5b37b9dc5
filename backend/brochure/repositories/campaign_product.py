from typing import List, Optional, Tuple
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from brochure.repositories.base import BaseRepository
from brochure.db.models.campaign_product import CampaignProduct
from brochure.db.models.product import Product


class CampaignProductRepository(BaseRepository[CampaignProduct]):
    """캠페인-상품 배치 Repository"""

    def __init__(self, session: AsyncSession):
        super().__init__(CampaignProduct, session)

    async def get_by_campaign(self, campaign_id: int) -> List[CampaignProduct]:
        return await self.list_by(campaign_id=campaign_id)

    async def get_by_campaign_with_products(
        self,
        campaign_id: int
    ) -> List[Tuple[CampaignProduct, Optional[Product]]]:
        """상품 레코드를 함께 조회 (상품이 삭제된 경우 None)"""
        result = await self.session.execute(
            select(CampaignProduct, Product)
            .outerjoin(Product, Product.id == CampaignProduct.product_id)
            .where(CampaignProduct.campaign_id == campaign_id)
            .order_by(CampaignProduct.id)
        )
        return [(row[0], row[1]) for row in result.all()]

    async def update_position(self, id: int, x: float, y: float) -> Optional[CampaignProduct]:
        """제스처 종료 시 위치만 갱신"""
        return await self.update(id, position_x=x, position_y=y)
