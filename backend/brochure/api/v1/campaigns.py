"""
캠페인 API
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from brochure.api.deps import get_db
from brochure.core.exceptions import ResourceNotFoundError
from brochure.models.brochure_models import (
    CampaignCreate,
    CampaignProductCreate,
    CampaignProductRead,
    CampaignProductWithProduct,
    CampaignRead,
    CampaignUpdate,
    MessageResponse,
    ProductRead,
)
from brochure.repositories import (
    CampaignProductRepository,
    CampaignRepository,
    ProductRepository,
)

logger = logging.getLogger(__name__)

router = APIRouter()


async def _require_campaign(db: AsyncSession, campaign_id: int):
    campaign = await CampaignRepository(db).get(campaign_id)
    if campaign is None:
        raise ResourceNotFoundError("캠페인", campaign_id)
    return campaign


# ===== 캠페인 CRUD =====

@router.get("/", response_model=List[CampaignRead])
async def list_campaigns(
    user_id: int = Query(..., alias="userId", description="사용자 ID"),
    db: AsyncSession = Depends(get_db)
):
    """사용자의 캠페인 목록 (최신순)"""
    return await CampaignRepository(db).get_by_user(user_id)


@router.get("/{campaign_id}", response_model=CampaignRead)
async def get_campaign(campaign_id: int, db: AsyncSession = Depends(get_db)):
    return await _require_campaign(db, campaign_id)


@router.post("/", response_model=CampaignRead, status_code=status.HTTP_201_CREATED)
async def create_campaign(request: CampaignCreate, db: AsyncSession = Depends(get_db)):
    campaign = await CampaignRepository(db).create(**request.model_dump())
    logger.info(f"캠페인 생성: {campaign.id} (user={campaign.user_id})")
    return campaign


@router.put("/{campaign_id}", response_model=CampaignRead)
async def update_campaign(
    campaign_id: int,
    request: CampaignUpdate,
    db: AsyncSession = Depends(get_db)
):
    """전달된 필드만 갱신"""
    campaign = await CampaignRepository(db).update(campaign_id, **request.model_dump(exclude_unset=True))
    if campaign is None:
        raise ResourceNotFoundError("캠페인", campaign_id)
    return campaign


@router.delete("/{campaign_id}", response_model=MessageResponse)
async def delete_campaign(campaign_id: int, db: AsyncSession = Depends(get_db)):
    """캠페인과 소속 캠페인-상품 삭제"""
    if not await CampaignRepository(db).delete(campaign_id):
        raise ResourceNotFoundError("캠페인", campaign_id)
    logger.info(f"캠페인 삭제: {campaign_id}")
    return MessageResponse(message="Campaign deleted successfully")


# ===== 캠페인 상품 =====

@router.get("/{campaign_id}/products", response_model=List[CampaignProductWithProduct])
async def list_campaign_products(campaign_id: int, db: AsyncSession = Depends(get_db)):
    """캠페인 상품 목록 (상품 레코드 포함, 상품이 없으면 product=null)"""
    rows = await CampaignProductRepository(db).get_by_campaign_with_products(campaign_id)
    return [
        CampaignProductWithProduct(
            **CampaignProductRead.model_validate(record).model_dump(),
            product=ProductRead.model_validate(product) if product is not None else None,
        )
        for record, product in rows
    ]


@router.post(
    "/{campaign_id}/products",
    response_model=CampaignProductRead,
    status_code=status.HTTP_201_CREATED
)
async def add_campaign_product(
    campaign_id: int,
    request: CampaignProductCreate,
    db: AsyncSession = Depends(get_db)
):
    await _require_campaign(db, campaign_id)
    if await ProductRepository(db).get(request.product_id) is None:
        raise ResourceNotFoundError("상품", request.product_id)

    return await CampaignProductRepository(db).create(campaign_id=campaign_id, **request.model_dump())
