"""
로고 API
사용자당 활성 로고는 하나
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from brochure.api.deps import get_db
from brochure.core.exceptions import ResourceNotFoundError
from brochure.models.brochure_models import LogoCreate, LogoRead, MessageResponse
from brochure.repositories import LogoRepository

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=List[LogoRead])
async def list_logos(
    user_id: int = Query(..., alias="userId", description="사용자 ID"),
    db: AsyncSession = Depends(get_db)
):
    return await LogoRepository(db).get_by_user(user_id)


@router.get("/active", response_model=Optional[LogoRead])
async def get_active_logo(
    user_id: int = Query(..., alias="userId", description="사용자 ID"),
    db: AsyncSession = Depends(get_db)
):
    """활성 로고, 없으면 null"""
    return await LogoRepository(db).get_active(user_id)


@router.post("/", response_model=LogoRead, status_code=status.HTTP_201_CREATED)
async def create_logo(request: LogoCreate, db: AsyncSession = Depends(get_db)):
    repository = LogoRepository(db)
    logo = await repository.create(**request.model_dump(exclude={"is_active"}), is_active=False)
    if request.is_active:
        await repository.set_active(logo.user_id, logo.id)
        logo = await repository.get(logo.id)
    return logo


@router.post("/{logo_id}/activate", response_model=MessageResponse)
async def activate_logo(
    logo_id: int,
    user_id: int = Query(..., alias="userId", description="사용자 ID"),
    db: AsyncSession = Depends(get_db)
):
    """지정 로고 활성화 (같은 사용자의 다른 로고는 비활성)"""
    if not await LogoRepository(db).set_active(user_id, logo_id):
        raise ResourceNotFoundError("로고", logo_id)
    logger.info(f"로고 활성화: {logo_id} (user={user_id})")
    return MessageResponse(message="Logo activated successfully")


@router.delete("/{logo_id}", response_model=MessageResponse)
async def delete_logo(logo_id: int, db: AsyncSession = Depends(get_db)):
    if not await LogoRepository(db).delete(logo_id):
        raise ResourceNotFoundError("로고", logo_id)
    return MessageResponse(message="Logo deleted successfully")
