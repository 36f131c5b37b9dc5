"""
상품 카탈로그 API
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from brochure.api.deps import get_db
from brochure.core.exceptions import ResourceNotFoundError
from brochure.models.brochure_models import MessageResponse, ProductCreate, ProductRead, ProductUpdate
from brochure.repositories import ProductRepository

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=List[ProductRead])
async def search_products(
    search: Optional[str] = Query(None, description="이름/설명 검색어"),
    category: Optional[str] = Query(None, description="카테고리 (all 은 전체)"),
    db: AsyncSession = Depends(get_db)
):
    return await ProductRepository(db).search(search=search, category=category)


@router.get("/{product_id}", response_model=ProductRead)
async def get_product(product_id: int, db: AsyncSession = Depends(get_db)):
    product = await ProductRepository(db).get(product_id)
    if product is None:
        raise ResourceNotFoundError("상품", product_id)
    return product


@router.post("/", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
async def create_product(request: ProductCreate, db: AsyncSession = Depends(get_db)):
    product = await ProductRepository(db).create(**request.model_dump())
    logger.info(f"상품 생성: {product.id}")
    return product


@router.put("/{product_id}", response_model=ProductRead)
async def update_product(
    product_id: int,
    request: ProductUpdate,
    db: AsyncSession = Depends(get_db)
):
    product = await ProductRepository(db).update(product_id, **request.model_dump(exclude_unset=True))
    if product is None:
        raise ResourceNotFoundError("상품", product_id)
    return product


@router.delete("/{product_id}", response_model=MessageResponse)
async def delete_product(product_id: int, db: AsyncSession = Depends(get_db)):
    if not await ProductRepository(db).delete(product_id):
        raise ResourceNotFoundError("상품", product_id)
    return MessageResponse(message="Product deleted successfully")
