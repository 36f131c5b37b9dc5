from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from brochure.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """정수 id 기반 비동기 CRUD. 변경 메서드는 기본적으로 호출마다 커밋한다"""

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        self.model = model
        self.session = session

    def _where(self, query, filters):
        # 모델에 없는 키는 무시
        for key, value in filters.items():
            column = getattr(self.model, key, None)
            if column is not None:
                query = query.where(column == value)
        return query

    async def create(self, commit: bool = True, **fields) -> ModelType:
        """commit=False 면 flush 만 하고 트랜잭션은 호출자가 마무리"""
        instance = self.model(**fields)
        self.session.add(instance)
        if not commit:
            await self.session.flush()
            return instance
        await self.session.commit()
        await self.session.refresh(instance)
        return instance

    async def get(self, id: Any) -> Optional[ModelType]:
        return await self.session.get(self.model, id)

    async def list_by(self, **filters) -> List[ModelType]:
        """조건에 맞는 레코드 (id 오름차순)"""
        query = self._where(select(self.model), filters).order_by(self.model.id)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def update(self, id: Any, **fields) -> Optional[ModelType]:
        """전달된 컬럼만 갱신. 없는 id 는 None"""
        instance = await self.get(id)
        if instance is None:
            return None

        for key, value in fields.items():
            if key != "id" and hasattr(instance, key):
                setattr(instance, key, value)

        await self.session.commit()
        await self.session.refresh(instance)
        return instance

    async def delete(self, id: Any) -> bool:
        instance = await self.get(id)
        if instance is None:
            return False

        await self.session.delete(instance)
        await self.session.commit()
        return True

    async def count(self, **filters) -> int:
        query = self._where(select(func.count()).select_from(self.model), filters)
        result = await self.session.execute(query)
        return int(result.scalar_one())
