from typing import List, Optional
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from brochure.repositories.base import BaseRepository
from brochure.db.models.logo import Logo


class LogoRepository(BaseRepository[Logo]):
    """로고 Repository"""

    def __init__(self, session: AsyncSession):
        super().__init__(Logo, session)

    async def get_by_user(self, user_id: int) -> List[Logo]:
        return await self.list_by(user_id=user_id)

    async def get_active(self, user_id: int) -> Optional[Logo]:
        result = await self.session.execute(
            select(Logo)
            .where(Logo.user_id == user_id, Logo.is_active.is_(True))
            .order_by(Logo.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def set_active(self, user_id: int, logo_id: int) -> bool:
        """사용자의 다른 로고를 모두 비활성화하고 지정 로고만 활성화

        지정 로고가 해당 사용자 소유가 아니면 False (이 경우에도 비활성화는 반영됨)
        """
        await self.session.execute(
            update(Logo).where(Logo.user_id == user_id).values(is_active=False)
        )

        logo = await self.get(logo_id)
        if logo is None or logo.user_id != user_id:
            await self.session.commit()
            return False

        logo.is_active = True
        await self.session.commit()
        return True
