from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from brochure.repositories.base import BaseRepository
from brochure.db.models.template import Template


class TemplateRepository(BaseRepository[Template]):
    """템플릿 Repository"""

    def __init__(self, session: AsyncSession):
        super().__init__(Template, session)

    async def get_by_user(self, user_id: int) -> List[Template]:
        return await self.list_by(user_id=user_id)
