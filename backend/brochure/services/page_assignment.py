"""
페이지/상품 배정 관리

페이지 추가/삭제(상품 이동 포함), 페이지 간 드래그 앤 드롭 재배정, 페이지 수 변경 시 재분배.
"""

from enum import Enum
from typing import Callable, Dict, Optional

from brochure.core.config import settings
from brochure.core.exceptions import ItemLookupError, OutOfRangeError
from brochure.services.auto_layout_planner import apply_auto_layout
from brochure.services.brochure_geometry import ITEMS_PER_PAGE
from brochure.services.placement_store import PlacementStore
from brochure.utils.logger import get_logger

logger = get_logger(__name__)


class PageAssignmentManager:
    """상품 ↔ 페이지 매핑 관리"""

    def __init__(
        self,
        store: PlacementStore,
        relayout: Optional[Callable[[], object]] = None,
        max_pages: Optional[int] = None
    ):
        self.store = store
        self._relayout = relayout or (lambda: apply_auto_layout(self.store))
        self.max_pages = max_pages or settings.MAX_PAGES

    @property
    def page_count(self) -> int:
        return self.store.page_count

    def add_page(self) -> int:
        """빈 페이지 추가. 새 페이지 수 반환"""
        self.store.set_page_count(self.store.page_count + 1)
        logger.info("페이지 추가", context={"page_count": self.store.page_count})
        return self.store.page_count

    def remove_page(self) -> bool:
        """마지막 페이지 삭제 (페이지가 하나뿐이면 무시)

        삭제된 페이지의 상품은 새 마지막 페이지로 이동한다.
        """
        removed = self.store.page_count
        if removed <= 1:
            logger.debug("마지막 한 페이지는 삭제할 수 없음")
            return False

        migrated = [item.item_id for item in self.store.items_on_page(removed)]
        self.store.set_page_count(removed - 1)

        logger.info(
            "페이지 삭제",
            context={"removed_page": removed, "page_count": self.store.page_count, "migrated_items": migrated}
        )
        return True

    def move_product_to_page(self, item_id: int, target_page: int) -> int:
        """페이지 간 드래그 앤 드롭 재배정 후 자동 배치로 셀 점유를 다시 계산

        교환은 하지 않는다. 범위 밖 페이지는 가장 가까운 유효 페이지로 보정.
        반환값은 실제 배정된 페이지.
        """
        try:
            self.store.set_page(item_id, target_page)
        except OutOfRangeError as e:
            logger.warning("대상 페이지 보정", context={"item_id": item_id, "page": target_page, "clamped": e.clamped()})
            target_page = e.clamped()
            self.store.set_page(item_id, target_page)

        logger.info("상품 페이지 이동", context={"item_id": item_id, "page": target_page})
        self._relayout()
        return target_page

    def distribute_products_across_pages(self, page_count: int) -> Dict[int, int]:
        """인덱스 i 의 상품을 min(i // 9 + 1, page_count) 페이지로 배정"""
        if page_count < 1 or page_count > self.store.page_count:
            clamped = OutOfRangeError("page_count", page_count, 1, self.store.page_count).clamped()
            logger.warning("재분배 페이지 수 보정", context={"page_count": page_count, "clamped": clamped})
            page_count = clamped

        assignments: Dict[int, int] = {}
        for index, item in enumerate(self.store.items()):
            page = min(index // ITEMS_PER_PAGE + 1, page_count)
            self.store.set_page(item.item_id, page)
            assignments[item.item_id] = page
        return assignments

    def set_page_count(self, page_count: int) -> int:
        """페이지 수 선택 (1..max_pages) 후 상품 재분배"""
        if page_count < 1 or page_count > self.max_pages:
            clamped = OutOfRangeError("page_count", page_count, 1, self.max_pages).clamped()
            logger.warning("페이지 수 보정", context={"page_count": page_count, "clamped": clamped})
            page_count = clamped

        self.store.set_page_count(page_count)
        if len(self.store):
            self.distribute_products_across_pages(page_count)
        return page_count


class DropZoneState(str, Enum):
    IDLE = "idle"
    DRAG_OVER = "drag_over"


class PageDropZoneTracker:
    """페이지 드롭 영역: Idle → DragOver(drag_enter) → Idle(drag_leave / drop)"""

    def __init__(self, manager: PageAssignmentManager):
        self.manager = manager
        self.target_page: Optional[int] = None

    def state(self, page: int) -> DropZoneState:
        return DropZoneState.DRAG_OVER if self.target_page == page else DropZoneState.IDLE

    def drag_enter(self, page: int) -> None:
        self.target_page = page

    def drag_leave(self, page: Optional[int] = None) -> None:
        self.target_page = None

    @staticmethod
    def parse_payload(payload) -> Optional[int]:
        """드래그 페이로드(text/plain)에서 아이템 id 추출"""
        try:
            item_id = int(str(payload).strip())
        except (TypeError, ValueError):
            return None
        return item_id or None

    def drop(self, page: int, payload) -> Optional[int]:
        """드롭된 상품을 해당 페이지로 이동. 이동한 아이템 id 반환"""
        self.target_page = None

        item_id = self.parse_payload(payload)
        if item_id is None:
            logger.warning("잘못된 드래그 페이로드", context={"page": page, "payload": payload})
            return None

        try:
            self.manager.move_product_to_page(item_id, page)
        except ItemLookupError:
            logger.warning("드롭된 아이템이 존재하지 않음", context={"item_id": item_id, "page": page})
            return None
        return item_id
