"""
헬스 체크 API
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from brochure.api.deps import get_db, get_editor_manager
from brochure.core.config import settings
from brochure.services.brochure_editor_service import EditorSessionManager

router = APIRouter()


@router.get("/")
async def health_check() -> Dict[str, Any]:
    """
    헬스 체크 엔드포인트

    Returns:
        서버 상태 정보
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "project": settings.PROJECT_NAME,
    }


@router.get("/detailed")
async def detailed_health_check(
    db: AsyncSession = Depends(get_db),
    manager: EditorSessionManager = Depends(get_editor_manager)
) -> Dict[str, Any]:
    """
    상세 헬스 체크 엔드포인트 (데이터베이스 연결, 열린 에디터 세션 수)
    """
    try:
        await db.execute(text("SELECT 1"))
        database_status = "healthy"
    except SQLAlchemyError as e:
        database_status = f"error: {str(e)[:50]}"

    return {
        "status": "healthy" if database_status == "healthy" else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "project": settings.PROJECT_NAME,
        "configuration": {
            "debug": settings.DEBUG,
            "log_level": settings.LOG_LEVEL,
            "max_pages": settings.MAX_PAGES,
        },
        "services": {
            "database": database_status,
            "editor_sessions": len(manager),
        }
    }
