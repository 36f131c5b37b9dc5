"""
배치 상태 저장소

현재 편집 세션의 위치/회전/배율/페이지/그리드 셀을 보관하는 단일 진실 공급원.
상호작용 상태 머신, 자동 배치, 페이지 관리자만 이 객체를 변경한다.
"""

from typing import Dict, Iterable, List, Optional

from brochure.core.exceptions import ItemLookupError, OutOfRangeError
from brochure.models.layout_models import (
    CanvasItem,
    CanvasSize,
    ElementKind,
    FreeElement,
    Point,
    ScalePair,
)
from brochure.services.brochure_geometry import (
    DEFAULT_DATE_POSITION,
    FIXED_GRID_CELL_COUNT,
    compute_fixed_grid,
    normalize_canvas_size,
)
from brochure.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_ELEMENT_POSITIONS = {
    ElementKind.LOGO: Point(32, 32),
    ElementKind.COMPANY_NAME: Point(112, 32),
}


def has_saved_position(x: Optional[float], y: Optional[float]) -> bool:
    """저장된 좌표가 있는지 (둘 다 존재하고 (0, 0)이 아닐 때만)"""
    if x is None or y is None:
        return False
    return x != 0 or y != 0


class PlacementStore:
    """캔버스 아이템, 자유 요소, 페이지별 날짜 라벨 위치"""

    def __init__(self, canvas: CanvasSize, page_count: int = 1):
        self._canvas = normalize_canvas_size(canvas.width, canvas.height)
        self._items: Dict[int, CanvasItem] = {}
        self._elements: Dict[ElementKind, FreeElement] = {
            kind: FreeElement(kind=kind, position=position.copy())
            for kind, position in DEFAULT_ELEMENT_POSITIONS.items()
        }
        self._date_positions: Dict[int, Point] = {}
        self._page_count = max(int(page_count), 1)
        self._ensure_date_positions()

    # ===== 캔버스 / 페이지 =====

    @property
    def canvas(self) -> CanvasSize:
        return self._canvas

    def set_canvas(self, canvas: CanvasSize) -> None:
        self._canvas = normalize_canvas_size(canvas.width, canvas.height)

    @property
    def page_count(self) -> int:
        return self._page_count

    def set_page_count(self, page_count: int) -> None:
        """페이지 수 변경. 줄어들면 범위 밖 아이템은 새 마지막 페이지로 이동"""
        if page_count < 1:
            raise OutOfRangeError("page_count", page_count, 1, max(self._page_count, 1))

        for item in self._items.values():
            if item.page > page_count:
                item.page = page_count
        self._page_count = page_count
        self._ensure_date_positions()

    def _ensure_date_positions(self) -> None:
        for page in range(1, self._page_count + 1):
            if page not in self._date_positions:
                self._date_positions[page] = Point(*DEFAULT_DATE_POSITION)

    def _check_page(self, page: int) -> None:
        if not isinstance(page, int) or page < 1 or page > self._page_count:
            raise OutOfRangeError("page", page, 1, self._page_count)

    # ===== 아이템 조회 =====

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: int) -> bool:
        return item_id in self._items

    def items(self) -> List[CanvasItem]:
        """등장 순서대로"""
        return list(self._items.values())

    def item_ids(self) -> List[int]:
        return list(self._items.keys())

    def item(self, item_id: int) -> CanvasItem:
        try:
            return self._items[item_id]
        except KeyError:
            raise ItemLookupError(item_id) from None

    def find_item(self, item_id: int) -> Optional[CanvasItem]:
        return self._items.get(item_id)

    def items_on_page(self, page: int) -> List[CanvasItem]:
        return [item for item in self._items.values() if item.page == page]

    def occupant(self, page: int, grid_index: int, exclude: Optional[int] = None) -> Optional[CanvasItem]:
        """(페이지, 셀)을 차지한 다른 아이템"""
        for item in self._items.values():
            if item.item_id == exclude:
                continue
            if item.page == page and item.grid_index == grid_index:
                return item
        return None

    def next_free_cell(self, page: int) -> int:
        """페이지에서 비어 있는 가장 낮은 셀. 가득 차면 마지막 셀"""
        taken = {item.grid_index for item in self._items.values() if item.page == page}
        for index in range(FIXED_GRID_CELL_COUNT):
            if index not in taken:
                return index
        return FIXED_GRID_CELL_COUNT - 1

    # ===== 아이템 추가/삭제 =====

    def add_item(
        self,
        item_id: int,
        *,
        saved_x: Optional[float] = None,
        saved_y: Optional[float] = None,
        page: int = 1,
        scale: Optional[ScalePair] = None,
        rotation: float = 0.0,
        **product_fields
    ) -> CanvasItem:
        """아이템 추가

        저장된 (0이 아닌) 좌표가 있으면 그대로 사용하고 그리드 셀은 비워 둔다.
        없으면 해당 페이지의 다음 빈 고정 그리드 셀에 배치한다.
        """
        if item_id in self._items:
            logger.warning("이미 배치된 아이템 재추가 무시", context={"item_id": item_id})
            return self._items[item_id]

        try:
            self._check_page(page)
        except OutOfRangeError as e:
            logger.warning("아이템 페이지 보정", context={"item_id": item_id, "page": page, "clamped": e.clamped()})
            page = e.clamped()

        item = CanvasItem(
            item_id=item_id,
            rotation=float(rotation or 0.0),
            scale=scale or ScalePair(),
            page=page,
            **product_fields
        )

        if has_saved_position(saved_x, saved_y):
            item.position = Point(float(saved_x), float(saved_y))
        else:
            cell_index = self.next_free_cell(page)
            grid = compute_fixed_grid(self._canvas.width, self._canvas.height)
            item.grid_index = cell_index
            item.position = grid.cells[cell_index].to_point()

        self._items[item_id] = item
        logger.debug(
            "아이템 배치",
            context={"item_id": item_id, "page": page, "grid_index": item.grid_index, "position": item.position.to_dict()}
        )
        return item

    def remove_item(self, item_id: int) -> CanvasItem:
        item = self.item(item_id)
        del self._items[item_id]
        return item

    def rekey_items(self, mapping: Dict[int, int]) -> None:
        """아이템 id 교체 (저장 후 임시 id → 레코드 id). 등장 순서는 유지"""
        rekeyed: Dict[int, CanvasItem] = {}
        for item_id, item in self._items.items():
            item.item_id = mapping.get(item_id, item_id)
            rekeyed[item.item_id] = item
        self._items = rekeyed

    # ===== 아이템 속성 =====

    def get_position(self, item_id: int) -> Point:
        return self.item(item_id).position

    def set_position(self, item_id: int, position: Point) -> None:
        self.item(item_id).position = Point(float(position.x), float(position.y))

    def get_rotation(self, item_id: int) -> float:
        return self.item(item_id).rotation

    def set_rotation(self, item_id: int, rotation: float) -> None:
        self.item(item_id).rotation = float(rotation)

    def get_scale(self, item_id: int) -> ScalePair:
        return self.item(item_id).scale

    def set_scale(self, item_id: int, scale: ScalePair) -> None:
        self.item(item_id).scale = ScalePair(scale.scale_x, scale.scale_y)

    def get_page(self, item_id: int) -> int:
        return self.item(item_id).page

    def set_page(self, item_id: int, page: int) -> None:
        """유효 페이지 범위 [1, page_count] 밖이면 OutOfRangeError"""
        item = self.item(item_id)
        self._check_page(page)
        item.page = page

    def get_grid_index(self, item_id: int) -> Optional[int]:
        return self.item(item_id).grid_index

    def set_grid_index(self, item_id: int, grid_index: Optional[int]) -> None:
        item = self.item(item_id)
        if grid_index is not None and not 0 <= grid_index < FIXED_GRID_CELL_COUNT:
            raise OutOfRangeError("grid_index", grid_index, 0, FIXED_GRID_CELL_COUNT - 1)
        item.grid_index = grid_index

    # ===== 자유 요소 =====

    def element(self, kind: ElementKind) -> FreeElement:
        return self._elements[ElementKind(kind)]

    def elements(self) -> Iterable[FreeElement]:
        return self._elements.values()

    def set_element_position(self, kind: ElementKind, position: Point) -> None:
        self.element(kind).position = Point(float(position.x), float(position.y))

    # ===== 날짜 라벨 =====

    def date_position(self, page: int) -> Point:
        self._check_page(page)
        return self._date_positions[page]

    def set_date_position(self, page: int, position: Point) -> None:
        self._check_page(page)
        self._date_positions[page] = Point(float(position.x), float(position.y))

    def date_positions(self) -> Dict[int, Point]:
        return {page: self._date_positions[page] for page in range(1, self._page_count + 1)}
