"""
브로셔 템플릿 API
파일 업로드는 외부 협력자, 레코드에는 /uploads/<filename> 경로만 저장
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from brochure.api.deps import get_db
from brochure.core.exceptions import ResourceNotFoundError
from brochure.models.brochure_models import MessageResponse, TemplateCreate, TemplateRead
from brochure.repositories import TemplateRepository

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=List[TemplateRead])
async def list_templates(
    user_id: int = Query(..., alias="userId", description="사용자 ID"),
    db: AsyncSession = Depends(get_db)
):
    return await TemplateRepository(db).get_by_user(user_id)


@router.get("/{template_id}", response_model=TemplateRead)
async def get_template(template_id: int, db: AsyncSession = Depends(get_db)):
    template = await TemplateRepository(db).get(template_id)
    if template is None:
        raise ResourceNotFoundError("템플릿", template_id)
    return template


@router.post("/", response_model=TemplateRead, status_code=status.HTTP_201_CREATED)
async def create_template(request: TemplateCreate, db: AsyncSession = Depends(get_db)):
    template = await TemplateRepository(db).create(**request.model_dump())
    logger.info(f"템플릿 등록: {template.id} ({template.file_path})")
    return template


@router.delete("/{template_id}", response_model=MessageResponse)
async def delete_template(template_id: int, db: AsyncSession = Depends(get_db)):
    if not await TemplateRepository(db).delete(template_id):
        raise ResourceNotFoundError("템플릿", template_id)
    return MessageResponse(message="Template deleted successfully")
