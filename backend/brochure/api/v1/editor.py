"""
브로셔 에디터 세션 API
레이아웃 엔진을 REST 로 구동 (포인터 제스처는 editor_websocket 참고)
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from brochure.api.deps import get_db, get_editor_manager, get_export_service
from brochure.core.exceptions import ResourceNotFoundError
from brochure.models.editor_models import (
    AddProductRequest,
    DragEventRequest,
    ExportRequest,
    MoveProductRequest,
    PageCountRequest,
    SaveCampaignRequest,
    SessionCreateRequest,
    SettingsUpdateRequest,
)
from brochure.repositories import ProductRepository
from brochure.services.brochure_editor_service import EditorSessionManager
from brochure.services.brochure_export_service import BrochureExportService
from brochure.services.logging_service import log_api_call

logger = logging.getLogger(__name__)

router = APIRouter()


# ===== 세션 =====

@router.post("/sessions", status_code=status.HTTP_201_CREATED)
@log_api_call("editor_open_session")
async def open_session(
    request: SessionCreateRequest,
    manager: EditorSessionManager = Depends(get_editor_manager)
) -> Dict[str, Any]:
    """
    에디터 세션 열기

    - **campaignId**: 저장된 캠페인 배치로 시작 (없으면 빈 브로셔)
    - **designMode**: 400×533 디자인 캔버스 사용, 잠시 후 자동 배치
    """
    session = await manager.open_session(
        campaign_id=request.campaign_id,
        design_mode=request.design_mode,
        initial_pages=request.initial_pages,
        user_id=request.user_id,
        page_templates=request.page_templates,
    )
    return session.snapshot()


@router.get("/sessions/{session_id}")
async def get_session(
    session_id: str,
    drain: bool = Query(False, description="알림 큐 비우기"),
    manager: EditorSessionManager = Depends(get_editor_manager)
) -> Dict[str, Any]:
    return manager.get(session_id).snapshot(drain_notifications=drain)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_session(
    session_id: str,
    manager: EditorSessionManager = Depends(get_editor_manager)
):
    if not await manager.close_session(session_id):
        raise ResourceNotFoundError("에디터 세션", session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ===== 배치 =====

@router.post("/sessions/{session_id}/auto-layout")
async def run_auto_layout(
    session_id: str,
    manager: EditorSessionManager = Depends(get_editor_manager)
) -> Dict[str, Any]:
    session = manager.get(session_id)
    session.auto_layout()
    return session.snapshot()


@router.post("/sessions/{session_id}/redistribute")
async def redistribute_products(
    session_id: str,
    manager: EditorSessionManager = Depends(get_editor_manager)
) -> Dict[str, Any]:
    """상품을 현재 페이지 수에 맞춰 재배정"""
    session = manager.get(session_id)
    session.redistribute()
    return session.snapshot()


# ===== 페이지 =====

@router.post("/sessions/{session_id}/pages")
async def add_page(
    session_id: str,
    manager: EditorSessionManager = Depends(get_editor_manager)
) -> Dict[str, Any]:
    session = manager.get(session_id)
    session.add_page()
    return session.snapshot()


@router.delete("/sessions/{session_id}/pages")
async def remove_page(
    session_id: str,
    manager: EditorSessionManager = Depends(get_editor_manager)
) -> Dict[str, Any]:
    """마지막 페이지 제거 (한 페이지만 남았으면 변경 없음)"""
    session = manager.get(session_id)
    removed = session.remove_page()
    return {**session.snapshot(), "removed": removed}


@router.put("/sessions/{session_id}/pages")
async def set_page_count(
    session_id: str,
    request: PageCountRequest,
    manager: EditorSessionManager = Depends(get_editor_manager)
) -> Dict[str, Any]:
    """페이지 수 선택 (1..MAX_PAGES 로 보정 후 재배정)"""
    session = manager.get(session_id)
    session.set_page_count(request.page_count)
    return session.snapshot()


@router.post("/sessions/{session_id}/pages/{page}/drag-events")
async def page_drag_event(
    session_id: str,
    page: int,
    request: DragEventRequest,
    manager: EditorSessionManager = Depends(get_editor_manager)
) -> Dict[str, Any]:
    """페이지 드롭 영역 이벤트 (drag_enter / drag_leave / drop)"""
    session = manager.get(session_id)
    if request.event == "drag_enter":
        session.drag_enter(page)
    elif request.event == "drag_leave":
        session.drag_leave(page)
    else:
        session.drop(page, request.payload)
    return session.snapshot()


# ===== 상품 =====

@router.post("/sessions/{session_id}/products", status_code=status.HTTP_201_CREATED)
async def add_product(
    session_id: str,
    request: AddProductRequest,
    manager: EditorSessionManager = Depends(get_editor_manager),
    db: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    """카탈로그 상품을 브로셔에 추가"""
    session = manager.get(session_id)
    product = await ProductRepository(db).get(request.product_id)
    if product is None:
        raise ResourceNotFoundError("상품", request.product_id)

    session.add_product(
        product.id,
        item_id=request.item_id,
        name=product.name,
        image_url=product.image_url,
        original_price=product.original_price,
        quantity=request.quantity,
        discount_percent=request.discount_percent,
        new_price=request.new_price,
        page=request.page_number,
    )
    return session.snapshot()


@router.delete("/sessions/{session_id}/products/{item_id}")
async def remove_product(
    session_id: str,
    item_id: int,
    manager: EditorSessionManager = Depends(get_editor_manager)
) -> Dict[str, Any]:
    session = manager.get(session_id)
    session.remove_product(item_id)
    return session.snapshot()


@router.post("/sessions/{session_id}/products/move")
async def move_product_to_page(
    session_id: str,
    request: MoveProductRequest,
    manager: EditorSessionManager = Depends(get_editor_manager)
) -> Dict[str, Any]:
    session = manager.get(session_id)
    session.move_product_to_page(request.item_id, request.page_number)
    return session.snapshot()


# ===== 설정 / 저장 / 내보내기 =====

@router.patch("/sessions/{session_id}/settings")
async def update_settings(
    session_id: str,
    request: SettingsUpdateRequest,
    manager: EditorSessionManager = Depends(get_editor_manager)
) -> Dict[str, Any]:
    session = manager.get(session_id)
    session.update_settings(**request.model_dump(exclude_unset=True))
    return session.snapshot()


@router.post("/sessions/{session_id}/positions/flush")
async def flush_positions(
    session_id: str,
    manager: EditorSessionManager = Depends(get_editor_manager)
) -> Dict[str, Any]:
    """대기 중인 위치 변경을 저장소에 반영"""
    session = manager.get(session_id)
    committed = await session.flush_position_commits()
    return {**session.snapshot(), "committed": committed}


@router.post("/sessions/{session_id}/save", status_code=status.HTTP_201_CREATED)
@log_api_call("editor_save_campaign")
async def save_campaign(
    session_id: str,
    request: SaveCampaignRequest,
    manager: EditorSessionManager = Depends(get_editor_manager)
) -> Dict[str, Any]:
    """현재 배치를 새 캠페인으로 저장"""
    session = manager.get(session_id)
    campaign = await session.save_campaign(user_id=request.user_id)
    return {**session.snapshot(), "savedCampaignId": campaign.id}


@router.post("/sessions/{session_id}/export")
async def export_brochure(
    session_id: str,
    request: ExportRequest,
    manager: EditorSessionManager = Depends(get_editor_manager),
    export_service: BrochureExportService = Depends(get_export_service)
) -> Response:
    """PNG/JPEG/PDF 내보내기 (여러 페이지 이미지는 ZIP)"""
    session = manager.get(session_id)
    result = export_service.export(session, request.format)
    logger.info(f"브로셔 내보내기: {session_id} ({result.filename}, {result.page_count} pages)")
    return Response(
        content=result.content,
        media_type=result.media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{result.filename}"',
            "X-Page-Count": str(result.page_count),
        }
    )
