"""
캠페인-상품 배치 레코드 API
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from brochure.api.deps import get_db
from brochure.core.exceptions import ResourceNotFoundError
from brochure.models.brochure_models import (
    CampaignProductRead,
    CampaignProductUpdate,
    MessageResponse,
    PositionUpdateRequest,
)
from brochure.repositories import CampaignProductRepository

logger = logging.getLogger(__name__)

router = APIRouter()


@router.put("/{campaign_product_id}", response_model=CampaignProductRead)
async def update_campaign_product(
    campaign_product_id: int,
    request: CampaignProductUpdate,
    db: AsyncSession = Depends(get_db)
):
    record = await CampaignProductRepository(db).update(
        campaign_product_id,
        **request.model_dump(exclude_unset=True)
    )
    if record is None:
        raise ResourceNotFoundError("캠페인 상품", campaign_product_id)
    return record


@router.put("/{campaign_product_id}/position", response_model=CampaignProductRead)
async def update_campaign_product_position(
    campaign_product_id: int,
    request: PositionUpdateRequest,
    db: AsyncSession = Depends(get_db)
):
    """드래그 종료 후 위치만 갱신"""
    record = await CampaignProductRepository(db).update_position(campaign_product_id, request.x, request.y)
    if record is None:
        raise ResourceNotFoundError("캠페인 상품", campaign_product_id)
    return record


@router.delete("/{campaign_product_id}", response_model=MessageResponse)
async def remove_campaign_product(campaign_product_id: int, db: AsyncSession = Depends(get_db)):
    if not await CampaignProductRepository(db).delete(campaign_product_id):
        raise ResourceNotFoundError("캠페인 상품", campaign_product_id)
    logger.info(f"캠페인 상품 삭제: {campaign_product_id}")
    return MessageResponse(message="Product removed from campaign")
