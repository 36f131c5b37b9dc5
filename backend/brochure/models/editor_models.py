# 에디터 세션 요청 스키마 (REST + WebSocket 메시지)

from datetime import datetime
from typing import Dict, List, Literal, Optional, Union

from pydantic import Field

from brochure.models.brochure_models import CamelModel
from brochure.models.layout_models import ElementKind, ExportFormat, PointerTarget


class SessionCreateRequest(CamelModel):
    campaign_id: Optional[int] = None
    user_id: Optional[int] = None
    design_mode: bool = False
    initial_pages: int = Field(default=1, ge=1)
    page_templates: Optional[Dict[int, Optional[int]]] = None


class AddProductRequest(CamelModel):
    product_id: int
    item_id: Optional[int] = None
    quantity: int = Field(default=1, ge=1)
    discount_percent: float = Field(default=0, ge=0, le=100)
    new_price: Optional[float] = Field(default=None, ge=0)
    page_number: int = Field(default=1, ge=1)


class PageCountRequest(CamelModel):
    page_count: int


class MoveProductRequest(CamelModel):
    item_id: int
    page_number: int


class SettingsUpdateRequest(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    company_name: Optional[str] = None
    show_company_name: Optional[bool] = None
    template_id: Optional[int] = None
    logo_id: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    page_templates: Optional[Dict[int, Optional[int]]] = None
    clear_fields: List[str] = Field(default_factory=list)


class DragEventRequest(CamelModel):
    """페이지 드롭 영역 이벤트"""
    event: Literal["drag_enter", "drag_leave", "drop"]
    payload: Optional[str] = None


class SaveCampaignRequest(CamelModel):
    user_id: Optional[int] = None


class ExportRequest(CamelModel):
    format: ExportFormat = ExportFormat.PNG


# ===== WebSocket 메시지 =====

class PointerDownMessage(CamelModel):
    type: Literal["pointer_down"]
    target: PointerTarget
    x: float
    y: float
    item_id: Optional[int] = None
    element: Optional[ElementKind] = None
    page: Optional[int] = None


class PointerMoveMessage(CamelModel):
    type: Literal["pointer_move"]
    x: float
    y: float


class PointerUpMessage(CamelModel):
    type: Literal["pointer_up", "pointer_leave"]


class DragEnterLeaveMessage(CamelModel):
    type: Literal["drag_enter", "drag_leave"]
    page: int


class DropMessage(CamelModel):
    type: Literal["drop"]
    page: int
    payload: Optional[str] = None


class PingMessage(CamelModel):
    type: Literal["ping"]


EditorMessage = Union[
    PointerDownMessage,
    PointerMoveMessage,
    PointerUpMessage,
    DragEnterLeaveMessage,
    DropMessage,
    PingMessage,
]
