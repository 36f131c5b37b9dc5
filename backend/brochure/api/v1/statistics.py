"""
대시보드 통계 API
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from brochure.api.deps import get_db
from brochure.models.brochure_models import StatisticsRead
from brochure.repositories import CampaignRepository, TemplateRepository

router = APIRouter()


@router.get("/", response_model=StatisticsRead)
async def get_statistics(
    user_id: int = Query(..., alias="userId", description="사용자 ID"),
    db: AsyncSession = Depends(get_db)
):
    campaigns = CampaignRepository(db)
    return StatisticsRead(
        total_campaigns=await campaigns.count(user_id=user_id),
        active_campaigns=await campaigns.count_active(user_id),
        total_templates=await TemplateRepository(db).count(user_id=user_id),
    )
