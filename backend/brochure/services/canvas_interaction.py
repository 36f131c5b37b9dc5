"""
캔버스 상호작용 상태 머신

pointer_down 에서 하나의 조작 세션을 만들고, pointer_move 로 배치 저장소를 갱신하며,
pointer_up / pointer_leave 에서 마무리(상품 드래그는 그리드 스냅 + 교환)한다.
세션은 태그된 값 하나로 표현되므로 동시에 두 조작이 활성화될 수 없다.
"""

from dataclasses import dataclass, replace
from typing import ClassVar, Dict, List, Optional, Union

from brochure.core.exceptions import ItemLookupError, OutOfRangeError
from brochure.models.layout_models import (
    CanvasItem,
    ElementKind,
    InteractionKind,
    Point,
    PositionUpdate,
    ScalePair,
)
from brochure.services.brochure_geometry import (
    DATE_LABEL_HEIGHT,
    DATE_LABEL_WIDTH,
    ELEMENT_FOOTPRINT,
    LOGO_BASE_SIZE,
    LOGO_MIN_SCALE,
    PRODUCT_FOOTPRINT,
    PRODUCT_MIN_SCALE,
    RESIZE_SENSITIVITY,
    clamp_to_canvas,
    compute_fixed_grid,
    nearest_cell_index,
    pointer_angle,
)
from brochure.services.placement_store import PlacementStore
from brochure.utils.logger import get_logger

logger = get_logger(__name__)


# ===== 세션 값 =====

@dataclass(frozen=True)
class Idle:
    kind: ClassVar[InteractionKind] = InteractionKind.IDLE


@dataclass(frozen=True)
class DraggingElement:
    element: ElementKind
    kind: ClassVar[InteractionKind] = InteractionKind.DRAGGING_ELEMENT


@dataclass(frozen=True)
class DraggingProduct:
    item_id: int
    kind: ClassVar[InteractionKind] = InteractionKind.DRAGGING_PRODUCT


@dataclass(frozen=True)
class RotatingProduct:
    item_id: int
    last_angle: float
    kind: ClassVar[InteractionKind] = InteractionKind.ROTATING_PRODUCT


@dataclass(frozen=True)
class ResizingProduct:
    item_id: int
    start_scale: float
    start_pointer: Point
    kind: ClassVar[InteractionKind] = InteractionKind.RESIZING_PRODUCT


@dataclass(frozen=True)
class DraggingDate:
    page: int
    grab_offset: Point
    kind: ClassVar[InteractionKind] = InteractionKind.DRAGGING_DATE


@dataclass(frozen=True)
class RotatingLogo:
    last_angle: float
    kind: ClassVar[InteractionKind] = InteractionKind.ROTATING_LOGO


@dataclass(frozen=True)
class ResizingLogo:
    start_scale: float
    start_pointer: Point
    kind: ClassVar[InteractionKind] = InteractionKind.RESIZING_LOGO


InteractionSession = Union[
    Idle,
    DraggingElement,
    DraggingProduct,
    RotatingProduct,
    ResizingProduct,
    DraggingDate,
    RotatingLogo,
    ResizingLogo,
]

IDLE = Idle()


def product_center(item: CanvasItem) -> Point:
    half = PRODUCT_FOOTPRINT / 2
    return Point(item.position.x + half, item.position.y + half)


class InteractionMachine:
    """포인터 이벤트 → 배치 저장소 변경"""

    def __init__(self, store: PlacementStore):
        self.store = store
        self._session: InteractionSession = IDLE

    @property
    def session(self) -> InteractionSession:
        return self._session

    @property
    def kind(self) -> InteractionKind:
        return self._session.kind

    @property
    def is_active(self) -> bool:
        return not isinstance(self._session, Idle)

    def describe(self) -> dict:
        """스냅샷용 세션 요약"""
        data = {"kind": self.kind.value}
        for attribute in ("item_id", "page"):
            value = getattr(self._session, attribute, None)
            if value is not None:
                data["itemId" if attribute == "item_id" else "page"] = value
        element = getattr(self._session, "element", None)
        if element is not None:
            data["element"] = element.value
        return data

    def _enter(self, session: InteractionSession) -> bool:
        # 끝나지 않은 이전 제스처는 pointer_up 처럼 확정 (상품 드래그는 스냅)
        if self.is_active:
            logger.debug("이전 제스처 확정", context={"previous": self.kind.value, "next": session.kind.value})
            self.pointer_up()
        self._session = session
        logger.debug("제스처 시작", context=self.describe())
        return True

    def rekey(self, mapping: Dict[int, int]) -> None:
        """진행 중인 제스처의 아이템 id 교체"""
        item_id = getattr(self._session, "item_id", None)
        if item_id in mapping:
            self._session = replace(self._session, item_id=mapping[item_id])

    def _abandon(self, reason: str, item_id: Optional[int] = None) -> None:
        logger.warning(
            "제스처 중단",
            context={"reason": reason, "kind": self.kind.value, "item_id": item_id}
        )
        self._session = IDLE

    # ===== pointer_down =====

    def begin_element_drag(self, element: ElementKind) -> bool:
        return self._enter(DraggingElement(element=ElementKind(element)))

    def begin_product_drag(self, item_id: int) -> bool:
        if item_id not in self.store:
            self._abandon("unknown_item", item_id)
            return False
        return self._enter(DraggingProduct(item_id=item_id))

    def begin_product_rotate(self, item_id: int, pointer: Point) -> bool:
        item = self.store.find_item(item_id)
        if item is None:
            self._abandon("unknown_item", item_id)
            return False
        angle = pointer_angle(pointer, product_center(item))
        return self._enter(RotatingProduct(item_id=item_id, last_angle=angle))

    def begin_product_resize(self, item_id: int, pointer: Point) -> bool:
        item = self.store.find_item(item_id)
        if item is None:
            self._abandon("unknown_item", item_id)
            return False
        return self._enter(ResizingProduct(
            item_id=item_id,
            start_scale=item.scale.scale_x,
            start_pointer=pointer.copy(),
        ))

    def begin_date_drag(self, page: int, pointer: Point) -> bool:
        try:
            label = self.store.date_position(page)
        except OutOfRangeError as e:
            logger.warning("날짜 라벨 페이지 보정", context={"page": page, "clamped": e.clamped()})
            page = e.clamped()
            label = self.store.date_position(page)
        offset = Point(pointer.x - label.x, pointer.y - label.y)
        return self._enter(DraggingDate(page=page, grab_offset=offset))

    def begin_logo_rotate(self, pointer: Point) -> bool:
        angle = pointer_angle(pointer, self._logo_center())
        return self._enter(RotatingLogo(last_angle=angle))

    def begin_logo_resize(self, pointer: Point) -> bool:
        logo = self.store.element(ElementKind.LOGO)
        return self._enter(ResizingLogo(start_scale=logo.scale, start_pointer=pointer.copy()))

    def _logo_center(self) -> Point:
        logo = self.store.element(ElementKind.LOGO)
        half = LOGO_BASE_SIZE / 2
        return Point(logo.position.x + half, logo.position.y + half)

    # ===== pointer_move =====

    def pointer_move(self, pointer: Point) -> bool:
        """활성 세션에 따라 위치/회전/배율 갱신. 변경이 있었으면 True"""
        session = self._session
        if isinstance(session, Idle):
            return False

        logger.debug_gesture("pointer_move", context={"kind": session.kind.value, "x": pointer.x, "y": pointer.y})
        try:
            if isinstance(session, DraggingElement):
                self._move_element(session, pointer)
            elif isinstance(session, DraggingProduct):
                self._move_product(session, pointer)
            elif isinstance(session, RotatingProduct):
                self._rotate_product(session, pointer)
            elif isinstance(session, ResizingProduct):
                self._resize_product(session, pointer)
            elif isinstance(session, DraggingDate):
                self._move_date(session, pointer)
            elif isinstance(session, RotatingLogo):
                self._rotate_logo(session, pointer)
            elif isinstance(session, ResizingLogo):
                self._resize_logo(session, pointer)
        except ItemLookupError as e:
            # 제스처 도중 아이템이 삭제됨
            self._abandon("item_removed", e.item_id)
            return False
        return True

    def _move_element(self, session: DraggingElement, pointer: Point) -> None:
        canvas = self.store.canvas
        half = ELEMENT_FOOTPRINT / 2
        self.store.set_element_position(session.element, Point(
            clamp_to_canvas(pointer.x - half, canvas.width, ELEMENT_FOOTPRINT),
            clamp_to_canvas(pointer.y - half, canvas.height, ELEMENT_FOOTPRINT),
        ))

    def _move_product(self, session: DraggingProduct, pointer: Point) -> None:
        canvas = self.store.canvas
        half = PRODUCT_FOOTPRINT / 2
        self.store.set_position(session.item_id, Point(
            clamp_to_canvas(pointer.x - half, canvas.width, PRODUCT_FOOTPRINT),
            clamp_to_canvas(pointer.y - half, canvas.height, PRODUCT_FOOTPRINT),
        ))

    def _rotate_product(self, session: RotatingProduct, pointer: Point) -> None:
        item = self.store.item(session.item_id)
        current = pointer_angle(pointer, product_center(item))
        # 누적값이므로 정규화하지 않음
        item.rotation += current - session.last_angle
        self._session = replace(session, last_angle=current)

    def _resize_product(self, session: ResizingProduct, pointer: Point) -> None:
        self.store.item(session.item_id)
        factor = self._scale_factor(session.start_scale, session.start_pointer, pointer, PRODUCT_MIN_SCALE)
        self.store.set_scale(session.item_id, ScalePair.uniform(factor))

    def _move_date(self, session: DraggingDate, pointer: Point) -> None:
        canvas = self.store.canvas
        self.store.set_date_position(session.page, Point(
            clamp_to_canvas(pointer.x - session.grab_offset.x, canvas.width, DATE_LABEL_WIDTH),
            clamp_to_canvas(pointer.y - session.grab_offset.y, canvas.height, DATE_LABEL_HEIGHT),
        ))

    def _rotate_logo(self, session: RotatingLogo, pointer: Point) -> None:
        logo = self.store.element(ElementKind.LOGO)
        current = pointer_angle(pointer, self._logo_center())
        logo.rotation += current - session.last_angle
        self._session = replace(session, last_angle=current)

    def _resize_logo(self, session: ResizingLogo, pointer: Point) -> None:
        logo = self.store.element(ElementKind.LOGO)
        logo.scale = self._scale_factor(session.start_scale, session.start_pointer, pointer, LOGO_MIN_SCALE)

    @staticmethod
    def _scale_factor(start_scale: float, start: Point, pointer: Point, floor: float) -> float:
        avg_delta = ((pointer.x - start.x) + (pointer.y - start.y)) / 2
        return max(floor, start_scale + avg_delta / RESIZE_SENSITIVITY)

    # ===== pointer_up / pointer_leave =====

    def pointer_up(self) -> List[PositionUpdate]:
        """제스처 마무리. 상품 드래그는 가장 가까운 셀로 스냅하고 저장할 위치 목록 반환"""
        session = self._session
        self._session = IDLE

        if isinstance(session, Idle):
            return []

        logger.debug("제스처 종료", context={"kind": session.kind.value})
        if not isinstance(session, DraggingProduct):
            return []

        item = self.store.find_item(session.item_id)
        if item is None:
            logger.warning("제스처 중단", context={"reason": "item_removed", "item_id": session.item_id})
            return []
        return self._snap_product(item)

    def pointer_leave(self) -> List[PositionUpdate]:
        """캔버스 이탈은 pointer_up 과 동일하게 처리"""
        return self.pointer_up()

    def _snap_product(self, item: CanvasItem) -> List[PositionUpdate]:
        canvas = self.store.canvas
        grid = compute_fixed_grid(canvas.width, canvas.height)
        target_index = nearest_cell_index(grid, item.position)
        previous_index = item.grid_index

        occupant = self.store.occupant(item.page, target_index, exclude=item.item_id)

        target_cell = grid.cells[target_index]
        item.grid_index = target_index
        item.position = target_cell.to_point()
        updates = [PositionUpdate(item.item_id, item.position.x, item.position.y)]

        if occupant is not None:
            occupant.grid_index = previous_index
            if previous_index is not None:
                occupant.position = grid.cells[previous_index].to_point()
                updates.append(PositionUpdate(occupant.item_id, occupant.position.x, occupant.position.y))
            logger.info(
                "그리드 셀 교환",
                context={
                    "item_id": item.item_id,
                    "occupant_id": occupant.item_id,
                    "page": item.page,
                    "target_index": target_index,
                    "previous_index": previous_index,
                }
            )

        return updates
