"""
자동 배치 플래너

현재 페이지 배정을 기준으로 페이지마다 가변 그리드를 계산해 모든 상품 위치를 다시 잡는다.
배율은 1로 초기화하고 회전은 건드리지 않는다.
"""

import math
from collections import OrderedDict
from typing import Dict, List, Mapping, Sequence

from brochure.models.layout_models import CanvasItem, CanvasSize, Point, ScalePair
from brochure.services.brochure_geometry import (
    FIXED_GRID_CELL_COUNT,
    MIN_AUTO_LAYOUT_GAP,
    compute_dynamic_layout,
)
from brochure.services.placement_store import PlacementStore
from brochure.utils.logger import get_logger

logger = get_logger(__name__)


def group_by_page(
    items: Sequence[CanvasItem],
    page_assignments: Mapping[int, int]
) -> "OrderedDict[int, List[CanvasItem]]":
    """페이지별로 묶기 (페이지 안에서는 등장 순서 유지)"""
    pages: "OrderedDict[int, List[CanvasItem]]" = OrderedDict()
    for item in items:
        page = page_assignments.get(item.item_id, item.page) or 1
        pages.setdefault(page, []).append(item)
    return pages


def _gap(available: float, count: int, size: float) -> float:
    if count <= 1:
        return 0.0
    return max(MIN_AUTO_LAYOUT_GAP, (available - count * size) / (count - 1))


def run_auto_layout(
    items: Sequence[CanvasItem],
    page_assignments: Mapping[int, int],
    canvas: CanvasSize
) -> Dict[int, Point]:
    """아이템 id → 새 위치 (순수 함수)"""
    positions: Dict[int, Point] = {}

    for page, page_items in group_by_page(items, page_assignments).items():
        layout = compute_dynamic_layout(len(page_items), canvas.width, canvas.height)

        gap_x = _gap(layout.available_width, layout.cols, layout.item_size)
        gap_y = _gap(layout.available_height, layout.rows, layout.item_size)
        space_x = layout.item_size + gap_x
        space_y = layout.item_size + gap_y

        # 실제 사용된 행 수 기준으로 가운데 정렬
        rows_used = math.ceil(len(page_items) / layout.cols)
        total_width = (layout.cols - 1) * space_x + layout.item_size
        total_height = (rows_used - 1) * space_y + layout.item_size
        offset_x = (layout.available_width - total_width) / 2
        offset_y = (layout.available_height - total_height) / 2

        for index, item in enumerate(page_items):
            col = index % layout.cols
            row = index // layout.cols
            positions[item.item_id] = Point(
                layout.margin_x + offset_x + col * space_x,
                layout.margin_y + offset_y + row * space_y,
            )

    return positions


def apply_auto_layout(store: PlacementStore) -> Dict[int, Point]:
    """저장소에 자동 배치 결과를 반영

    위치는 모두 덮어쓰고 배율은 1로 초기화한다. 그리드 셀 점유는 페이지 내 순서로
    다시 계산한다 (앞의 9개만 셀을 갖고 나머지는 None).
    """
    items = store.items()
    if not items:
        return {}

    positions = run_auto_layout(items, {item.item_id: item.page for item in items}, store.canvas)

    for page, page_items in group_by_page(items, {}).items():
        for index, item in enumerate(page_items):
            item.position = positions[item.item_id]
            item.scale = ScalePair()
            item.grid_index = index if index < FIXED_GRID_CELL_COUNT else None

    logger.info(
        "자동 배치 적용",
        context={"items": len(items), "pages": sorted({item.page for item in items})}
    )
    return positions
