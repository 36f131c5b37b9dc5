"""
브로셔 에디터 세션 서비스

하나의 브로셔 편집 세션이 배치 저장소, 상호작용 상태 머신, 자동 배치, 페이지 배정,
드롭 영역, 디바운스 스케줄러를 묶어 관리한다. 모든 변경은 단일 이벤트 루프에서
순서대로 처리되며 제스처 처리 도중에는 await 하지 않는다.
"""

import uuid
from collections import OrderedDict
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from brochure.core.config import settings
from brochure.core.exceptions import (
    PersistenceError,
    ResourceNotFoundError,
    ValidationError,
)
from brochure.db.models import Campaign, CampaignProduct, CampaignStatus, Product
from brochure.models.layout_models import (
    ElementKind,
    Point,
    PointerTarget,
    PositionUpdate,
    ScalePair,
)
from brochure.services.auto_layout_planner import apply_auto_layout
from brochure.services.brochure_geometry import canvas_size_for_mode
from brochure.services.brochure_persistence import BrochurePersistenceGateway
from brochure.services.canvas_interaction import InteractionMachine
from brochure.services.layout_scheduler import DebouncedLayoutScheduler
from brochure.services.logging_service import logging_service
from brochure.services.page_assignment import PageAssignmentManager, PageDropZoneTracker
from brochure.services.placement_store import PlacementStore
from brochure.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_COMPANY_NAME = "Your Company Name"


@dataclass
class EditorNotification:
    level: str
    title: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"level": self.level, "title": self.title, "message": self.message}


@dataclass
class CampaignDraft:
    """저장 전 캠페인 설정"""
    name: str = ""
    description: Optional[str] = None
    company_name: str = DEFAULT_COMPANY_NAME
    show_company_name: bool = True
    template_id: Optional[int] = None
    logo_id: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    page_templates: Dict[int, Optional[int]] = field(default_factory=dict)

    @classmethod
    def from_campaign(cls, campaign: Campaign) -> "CampaignDraft":
        return cls(
            name=campaign.name or "",
            description=campaign.description,
            company_name=campaign.company_name or DEFAULT_COMPANY_NAME,
            template_id=campaign.template_id,
            logo_id=campaign.logo_id,
            start_date=campaign.start_date,
            end_date=campaign.end_date,
        )

    def effective_template_id(self) -> Optional[int]:
        """페이지별 템플릿 중 첫 번째 값, 없으면 선택된 템플릿"""
        for page in sorted(self.page_templates):
            if self.page_templates[page] is not None:
                return self.page_templates[page]
        return self.template_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "companyName": self.company_name,
            "showCompanyName": self.show_company_name,
            "templateId": self.template_id,
            "logoId": self.logo_id,
            "startDate": self.start_date.isoformat() if self.start_date else None,
            "endDate": self.end_date.isoformat() if self.end_date else None,
            "pageTemplates": {str(page): template for page, template in self.page_templates.items()},
        }


class EditorSession:
    """브로셔 한 부의 편집 상태"""

    def __init__(
        self,
        session_id: str,
        gateway: BrochurePersistenceGateway,
        *,
        design_mode: bool = False,
        page_count: int = 1,
        user_id: Optional[int] = None,
        campaign_id: Optional[int] = None,
        draft: Optional[CampaignDraft] = None,
    ):
        self.session_id = session_id
        self.gateway = gateway
        self.design_mode = design_mode
        self.user_id = user_id
        self.campaign_id = campaign_id
        self.draft = draft or CampaignDraft()

        self.store = PlacementStore(canvas_size_for_mode(design_mode), page_count)
        self.machine = InteractionMachine(self.store)
        self.assignments = PageAssignmentManager(self.store)
        self.drop_zones = PageDropZoneTracker(self.assignments)
        self.scheduler = DebouncedLayoutScheduler(
            self._run_scheduled_layout,
            is_busy=lambda: self.machine.is_active
        )

        self.edit_controls_visible = True
        self._pending_positions: "OrderedDict[int, PositionUpdate]" = OrderedDict()
        self._notifications: List[EditorNotification] = []
        self._next_local_id = -1

    # ===== 초기화 =====

    def load_records(self, records: Sequence[Tuple[CampaignProduct, Optional[Product]]]) -> None:
        """저장된 캠페인-상품 레코드로 배치 저장소 채우기"""
        for record, product in records:
            self.store.add_item(
                record.id,
                saved_x=record.position_x,
                saved_y=record.position_y,
                page=record.page_number or 1,
                scale=ScalePair(record.scale_x or 1, record.scale_y or 1),
                rotation=record.rotation or 0,
                product_id=record.product_id,
                name=product.name if product else "",
                image_url=product.image_url if product else None,
                original_price=product.original_price if product else None,
                quantity=record.quantity or 1,
                discount_percent=record.discount_percent or 0,
                new_price=record.new_price,
            )

    def enter_design_mode(self) -> None:
        """디자인 모드 진입 시 잠시 후 자동 배치"""
        if len(self.store):
            self.scheduler.schedule(settings.DESIGN_MODE_LAYOUT_DELAY_MS)

    # ===== 자동 배치 =====

    def _schedule_layout(self) -> None:
        if len(self.store):
            self.scheduler.schedule(settings.AUTO_LAYOUT_DEBOUNCE_MS)

    def _run_scheduled_layout(self) -> None:
        apply_auto_layout(self.store)

    def auto_layout(self) -> Dict[int, Point]:
        """명시적 자동 배치 (대기 중인 예약은 취소)"""
        self.scheduler.cancel()
        positions = apply_auto_layout(self.store)
        if positions:
            self.notify("success", "Smart Layout Applied", "Products arranged with balanced sizing and spacing.")
        return positions

    # ===== 상품 =====

    def add_product(
        self,
        product_id: int,
        *,
        item_id: Optional[int] = None,
        name: str = "",
        image_url: Optional[str] = None,
        original_price: Optional[float] = None,
        quantity: int = 1,
        discount_percent: float = 0.0,
        new_price: Optional[float] = None,
        page: int = 1,
    ):
        """상품 추가. item_id 가 없으면 저장 전 임시 id(음수) 발급"""
        if item_id is None:
            item_id = self._next_local_id
            self._next_local_id -= 1

        if new_price is None:
            base = original_price or 0.0
            new_price = round(base * (1 - discount_percent / 100), 2)

        item = self.store.add_item(
            item_id,
            page=page,
            product_id=product_id,
            name=name,
            image_url=image_url,
            original_price=original_price,
            quantity=quantity,
            discount_percent=discount_percent,
            new_price=new_price,
        )
        self._schedule_layout()
        return item

    def remove_product(self, item_id: int) -> None:
        self.store.remove_item(item_id)
        self._pending_positions.pop(item_id, None)
        self._schedule_layout()

    # ===== 페이지 =====

    def add_page(self) -> int:
        page_count = self.assignments.add_page()
        self._schedule_layout()
        return page_count

    def remove_page(self) -> bool:
        removed = self.assignments.remove_page()
        if removed:
            self._schedule_layout()
        return removed

    def set_page_count(self, page_count: int) -> int:
        page_count = self.assignments.set_page_count(page_count)
        self._schedule_layout()
        return page_count

    def redistribute(self) -> Dict[int, int]:
        assignments = self.assignments.distribute_products_across_pages(self.store.page_count)
        self._schedule_layout()
        return assignments

    def move_product_to_page(self, item_id: int, page: int) -> int:
        return self.assignments.move_product_to_page(item_id, page)

    # ===== 포인터 이벤트 =====

    def pointer_down(
        self,
        target: PointerTarget,
        x: float,
        y: float,
        *,
        item_id: Optional[int] = None,
        element: Optional[ElementKind] = None,
        page: Optional[int] = None,
    ) -> bool:
        # 이전 제스처가 남아 있으면 먼저 확정해 스냅 위치를 저장 큐에 올림
        if self.machine.is_active:
            self.pointer_up()

        pointer = Point(x, y)
        target = PointerTarget(target)

        if target == PointerTarget.ELEMENT:
            return self.machine.begin_element_drag(element or ElementKind.LOGO)
        if target == PointerTarget.LOGO_ROTATE_HANDLE:
            return self.machine.begin_logo_rotate(pointer)
        if target == PointerTarget.LOGO_RESIZE_HANDLE:
            return self.machine.begin_logo_resize(pointer)
        if target == PointerTarget.DATE_LABEL:
            return self.machine.begin_date_drag(page or 1, pointer)

        if item_id is None:
            logger.warning("상품 대상 pointer_down 에 item_id 없음", context={"target": target.value})
            return False
        if target == PointerTarget.PRODUCT:
            return self.machine.begin_product_drag(item_id)
        if target == PointerTarget.PRODUCT_ROTATE_HANDLE:
            return self.machine.begin_product_rotate(item_id, pointer)
        return self.machine.begin_product_resize(item_id, pointer)

    def pointer_move(self, x: float, y: float) -> bool:
        return self.machine.pointer_move(Point(x, y))

    def pointer_up(self) -> List[PositionUpdate]:
        updates = self.machine.pointer_up()
        self._queue_positions(updates)
        return updates

    def pointer_leave(self) -> List[PositionUpdate]:
        updates = self.machine.pointer_leave()
        self._queue_positions(updates)
        return updates

    def drag_enter(self, page: int) -> None:
        self.drop_zones.drag_enter(page)

    def drag_leave(self, page: Optional[int] = None) -> None:
        self.drop_zones.drag_leave(page)

    def drop(self, page: int, payload: Any) -> Optional[int]:
        return self.drop_zones.drop(page, payload)

    # ===== 위치 저장 =====

    def _queue_positions(self, updates: Sequence[PositionUpdate]) -> None:
        for update in updates:
            # 저장 전 임시 아이템은 캠페인 저장 시 한꺼번에 기록
            if update.item_id <= 0:
                continue
            self._pending_positions.pop(update.item_id, None)
            self._pending_positions[update.item_id] = update

    @property
    def pending_position_count(self) -> int:
        return len(self._pending_positions)

    async def flush_position_commits(self) -> int:
        """대기 중인 위치를 저장소에 반영. 실패분은 큐에 남겨 재시도 가능"""
        committed = 0
        for item_id, update in list(self._pending_positions.items()):
            try:
                found = await self.gateway.update_campaign_product_position(update.item_id, update.x, update.y)
            except PersistenceError as e:
                self.notify("error", "Position not saved", e.message)
                return committed

            if not found:
                logger.debug("위치를 저장할 레코드 없음", context={"item_id": item_id})
            else:
                committed += 1
            self._pending_positions.pop(item_id, None)
        return committed

    # ===== 캠페인 설정 / 저장 =====

    def update_settings(self, **changes: Any) -> CampaignDraft:
        """None 이 아닌 값만 반영 (명시적으로 지우려면 clear_fields 사용)"""
        clear_fields = changes.pop("clear_fields", None) or []
        for key, value in changes.items():
            if not hasattr(self.draft, key):
                raise ValidationError(f"알 수 없는 설정 항목입니다: {key}", field=key)
            if value is not None:
                setattr(self.draft, key, value)
        for key in clear_fields:
            if key in ("template_id", "logo_id", "start_date", "end_date", "description"):
                setattr(self.draft, key, None)
        return self.draft

    def _placement_snapshot(self) -> List[Dict[str, Any]]:
        placements = []
        for item in self.store.items():
            placements.append({
                "product_id": item.product_id,
                "quantity": item.quantity,
                "discount_percent": item.discount_percent,
                "new_price": item.new_price,
                "position_x": item.position.x,
                "position_y": item.position.y,
                "page_number": item.page,
                "scale_x": item.scale.scale_x,
                "scale_y": item.scale.scale_y,
                "rotation": item.rotation,
            })
        return placements

    async def save_campaign(self, user_id: Optional[int] = None) -> Campaign:
        """캠페인 생성 후 상품마다 배치 스냅샷 레코드 생성"""
        user_id = user_id or self.user_id
        if not self.draft.name.strip():
            self.notify("error", "Campaign name required", "Please enter a name for your campaign.")
            raise ValidationError("캠페인 이름이 필요합니다", field="name")
        if not len(self.store):
            self.notify("error", "No products selected", "Please add some products before creating a campaign.")
            raise ValidationError("브로셔에 상품이 없습니다", field="products")
        if user_id is None:
            raise ValidationError("사용자 ID가 필요합니다", field="userId")

        campaign_fields = {
            "name": self.draft.name.strip(),
            "description": self.draft.description or None,
            "status": CampaignStatus.ACTIVE.value,
            "company_name": self.draft.company_name,
            "user_id": user_id,
            "start_date": self.draft.start_date,
            "end_date": self.draft.end_date,
            "template_id": self.draft.effective_template_id(),
            "logo_id": self.draft.logo_id,
            "page_count": self.store.page_count,
        }

        item_ids = self.store.item_ids()
        try:
            campaign, records = await self.gateway.save_campaign(campaign_fields, self._placement_snapshot())
        except PersistenceError as e:
            self.notify("error", "Campaign creation failed", e.message)
            raise

        self._adopt_record_ids(dict(zip(item_ids, (record.id for record in records))))
        self.campaign_id = campaign.id
        self.user_id = user_id
        self.notify("success", "Campaign created successfully", "Your campaign has been saved with all product positions.")
        logging_service.log_editor_event(
            self.session_id,
            "campaign_saved",
            campaign_id=campaign.id,
            items=len(self.store),
            page_count=self.store.page_count,
        )
        return campaign

    def _adopt_record_ids(self, mapping: Dict[int, int]) -> None:
        """저장된 레코드 id 로 아이템 교체. 이후 드래그는 새 레코드에 위치가 기록된다"""
        # 저장 중 삭제된 아이템은 제외
        mapping = {old: new for old, new in mapping.items() if old in self.store}
        self.store.rekey_items(mapping)
        self.machine.rekey(mapping)
        for old_id in mapping:
            # 스냅샷에 이미 반영된 위치
            self._pending_positions.pop(old_id, None)

    # ===== 알림 =====

    def notify(self, level: str, title: str, message: str) -> None:
        self._notifications.append(EditorNotification(level, title, message))

    def drain_notifications(self) -> List[EditorNotification]:
        drained, self._notifications = self._notifications, []
        return drained

    # ===== 렌더링 =====

    @property
    def date_labels_visible(self) -> bool:
        return self.edit_controls_visible and bool(self.draft.start_date and self.draft.end_date)

    @contextmanager
    def hidden_edit_controls(self) -> Iterator[None]:
        """편집 전용 요소를 숨긴 상태로 캡처, 끝나면 원래 상태로 복원"""
        previous = self.edit_controls_visible
        self.edit_controls_visible = False
        try:
            yield
        finally:
            self.edit_controls_visible = previous

    def snapshot(self, drain_notifications: bool = False) -> Dict[str, Any]:
        """렌더링/클라이언트용 JSON 상태"""
        notifications = self.drain_notifications() if drain_notifications else list(self._notifications)
        date_positions = self.store.date_positions()
        return {
            "sessionId": self.session_id,
            "campaignId": self.campaign_id,
            "userId": self.user_id,
            "designMode": self.design_mode,
            "canvas": {"width": self.store.canvas.width, "height": self.store.canvas.height},
            "pageCount": self.store.page_count,
            "pages": [
                {
                    "pageNumber": page,
                    "dropZone": self.drop_zones.state(page).value,
                    "datePosition": date_positions[page].to_dict(),
                    "templateId": self.draft.page_templates.get(page),
                }
                for page in range(1, self.store.page_count + 1)
            ],
            "items": [item.to_dict() for item in self.store.items()],
            "elements": {element.kind.value: element.to_dict() for element in self.store.elements()},
            "settings": self.draft.to_dict(),
            "interaction": self.machine.describe(),
            "dropTargetPage": self.drop_zones.target_page,
            "editControlsVisible": self.edit_controls_visible,
            "dateLabelsVisible": self.date_labels_visible,
            "layoutPending": self.scheduler.pending,
            "pendingPositionUpdates": self.pending_position_count,
            "notifications": [notification.to_dict() for notification in notifications],
        }

    def close(self) -> None:
        self.scheduler.cancel()


class EditorSessionManager:
    """세션 id → EditorSession (단일 사용자, 프로세스 메모리)"""

    def __init__(self, gateway: Optional[BrochurePersistenceGateway] = None):
        self.gateway = gateway or BrochurePersistenceGateway()
        self._sessions: Dict[str, EditorSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    async def open_session(
        self,
        *,
        campaign_id: Optional[int] = None,
        design_mode: bool = False,
        initial_pages: int = 1,
        user_id: Optional[int] = None,
        page_templates: Optional[Dict[int, Optional[int]]] = None,
    ) -> EditorSession:
        records: List[Tuple[CampaignProduct, Optional[Product]]] = []
        draft = CampaignDraft()
        page_count = max(int(initial_pages or 1), 1)

        if campaign_id is not None:
            campaign = await self.gateway.get_campaign(campaign_id)
            if campaign is None:
                raise ResourceNotFoundError("캠페인", campaign_id)
            records = await self.gateway.load_campaign_products(campaign_id)
            draft = CampaignDraft.from_campaign(campaign)
            user_id = user_id or campaign.user_id
            saved_pages = [record.page_number or 1 for record, _ in records]
            page_count = max([page_count, campaign.page_count or 1] + saved_pages)

        if page_count > settings.MAX_PAGES:
            logger.warning("페이지 수 보정", context={"page_count": page_count, "max_pages": settings.MAX_PAGES})
            page_count = settings.MAX_PAGES

        if page_templates:
            draft.page_templates = dict(page_templates)

        session = EditorSession(
            uuid.uuid4().hex,
            self.gateway,
            design_mode=design_mode,
            page_count=page_count,
            user_id=user_id,
            campaign_id=campaign_id,
            draft=draft,
        )
        session.load_records(records)
        if design_mode:
            session.enter_design_mode()

        self._sessions[session.session_id] = session
        logging_service.log_editor_event(
            session.session_id,
            "session_opened",
            campaign_id=campaign_id,
            design_mode=design_mode,
            items=len(session.store),
            page_count=page_count,
        )
        return session

    def get(self, session_id: str) -> EditorSession:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise ResourceNotFoundError("에디터 세션", session_id) from None

    async def close_session(self, session_id: str) -> bool:
        """진행 중 제스처를 확정하고 대기 중인 위치를 저장한 뒤 종료"""
        session = self._sessions.get(session_id)
        if session is None:
            return False
        if session.machine.is_active:
            session.pointer_leave()
        if session.pending_position_count:
            await session.flush_position_commits()
        return self.close(session_id)

    async def shutdown(self) -> None:
        for session_id in list(self._sessions):
            await self.close_session(session_id)

    def close(self, session_id: str) -> bool:
        """즉시 종료. 저장되지 않은 위치 변경은 경고 후 폐기"""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        if session.pending_position_count:
            logger.warning(
                "저장되지 않은 위치 변경 폐기",
                context={"session_id": session_id, "dropped": session.pending_position_count}
            )
        session.close()
        logging_service.log_editor_event(session_id, "session_closed")
        return True


# 애플리케이션 전역 세션 관리자
editor_session_manager = EditorSessionManager()
