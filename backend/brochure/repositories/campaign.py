from typing import List
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from brochure.repositories.base import BaseRepository
from brochure.db.models.campaign import Campaign, CampaignStatus
from brochure.db.models.campaign_product import CampaignProduct


class CampaignRepository(BaseRepository[Campaign]):
    """캠페인 Repository"""

    def __init__(self, session: AsyncSession):
        super().__init__(Campaign, session)

    async def get_by_user(self, user_id: int) -> List[Campaign]:
        """사용자의 캠페인 목록 (최근 생성 순)"""
        result = await self.session.execute(
            select(Campaign)
            .where(Campaign.user_id == user_id)
            .order_by(Campaign.created_at.desc(), Campaign.id.desc())
        )
        return list(result.scalars().all())

    async def count_active(self, user_id: int) -> int:
        return await self.count(user_id=user_id, status=CampaignStatus.ACTIVE.value)

    async def delete(self, id: int) -> bool:
        """캠페인 삭제 (배치된 상품 레코드 포함)"""
        instance = await self.get(id)
        if not instance:
            return False

        await self.session.execute(
            delete(CampaignProduct).where(CampaignProduct.campaign_id == id)
        )
        await self.session.delete(instance)
        await self.session.commit()
        return True
