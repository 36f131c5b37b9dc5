from typing import List, Optional
from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from brochure.repositories.base import BaseRepository
from brochure.db.models.product import Product


class ProductRepository(BaseRepository[Product]):
    """상품 Repository"""

    def __init__(self, session: AsyncSession):
        super().__init__(Product, session)

    async def search(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None
    ) -> List[Product]:
        """이름/설명 부분 일치 검색 + 카테고리 필터 ("all"은 필터 없음)"""
        query = select(Product)

        if search:
            pattern = f"%{search.lower()}%"
            query = query.where(
                or_(
                    func.lower(Product.name).like(pattern),
                    func.lower(Product.description).like(pattern),
                )
            )

        if category and category != "all":
            query = query.where(Product.category == category)

        result = await self.session.execute(query.order_by(Product.id))
        return list(result.scalars().all())
