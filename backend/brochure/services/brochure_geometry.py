"""
브로셔 캔버스 기하 계산

고정 3x3 그리드(수동 배치/스냅용)와 상품 수에 따른 가변 그리드(자동 배치용)를
계산하는 순수 함수 모음. 상태를 갖지 않으며 같은 입력에 항상 같은 결과를 낸다.

캔버스 세로 구성:
    0 ~ 120      헤더
    120 ~ 164    배너
    +16          그리드 상단 여백  → 그리드 시작 y = 180
    ...          상품 영역
    -16          그리드 하단 여백
    -80          푸터
"""

import math
from typing import Optional

from brochure.core.config import settings
from brochure.core.exceptions import GeometryError
from brochure.models.layout_models import (
    CanvasSize,
    DynamicLayout,
    FixedGrid,
    GridCell,
    Point,
)
from brochure.utils.logger import get_logger

logger = get_logger(__name__)

# 캔버스 밴드
MARGIN_X = 40
HEADER_HEIGHT = 120
BANNER_HEIGHT = 44
GRID_PADDING = 16
FOOTER_HEIGHT = 80
GRID_TOP = HEADER_HEIGHT + BANNER_HEIGHT + GRID_PADDING
GRID_BOTTOM_OFFSET = FOOTER_HEIGHT + GRID_PADDING

# 고정 그리드
FIXED_GRID_COLS = 3
FIXED_GRID_ROWS = 3
FIXED_GRID_GAP = 14
FIXED_GRID_CELL_COUNT = FIXED_GRID_COLS * FIXED_GRID_ROWS

# 조작 대상 크기
PRODUCT_FOOTPRINT = 132
ELEMENT_FOOTPRINT = 50
LOGO_BASE_SIZE = 64
DATE_LABEL_WIDTH = 120
DATE_LABEL_HEIGHT = 30
DEFAULT_DATE_POSITION = (320, 20)

# 크기 조절
RESIZE_SENSITIVITY = 150
PRODUCT_MIN_SCALE = 0.1
LOGO_MIN_SCALE = 0.2

# 자동 배치
MIN_DYNAMIC_ITEM_SIZE = 90
MIN_AUTO_LAYOUT_GAP = 20
ITEMS_PER_PAGE = FIXED_GRID_CELL_COUNT

# 셀 크기가 최소 1px 이 되는 캔버스 크기
MIN_CANVAS_WIDTH = 2 * MARGIN_X + FIXED_GRID_GAP * (FIXED_GRID_COLS - 1) + FIXED_GRID_COLS
MIN_CANVAS_HEIGHT = GRID_TOP + GRID_BOTTOM_OFFSET + FIXED_GRID_GAP * (FIXED_GRID_ROWS - 1) + FIXED_GRID_ROWS


def _usable(value) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    return number


def validate_canvas_size(width, height) -> CanvasSize:
    """API 경계에서 사용하는 엄격한 검증. 0 이하/NaN/무한대는 GeometryError"""
    if _usable(width) is None or _usable(height) is None:
        raise GeometryError("캔버스 크기는 0보다 큰 유한한 값이어야 합니다", width=width, height=height)
    return normalize_canvas_size(width, height)


def normalize_canvas_size(width, height) -> CanvasSize:
    """잘못된 치수는 최소 사용 가능 영역으로 보정 (NaN/Infinity 좌표 방지)"""
    w = _usable(width)
    h = _usable(height)
    normalized = CanvasSize(
        width=max(w if w is not None else MIN_CANVAS_WIDTH, MIN_CANVAS_WIDTH),
        height=max(h if h is not None else MIN_CANVAS_HEIGHT, MIN_CANVAS_HEIGHT),
    )
    if (w, h) != (normalized.width, normalized.height):
        logger.warning(
            "캔버스 크기 보정",
            context={"width": width, "height": height, "normalized": [normalized.width, normalized.height]}
        )
    return normalized


def canvas_size_for_mode(design_mode: bool) -> CanvasSize:
    """디자인 모드는 축소 캔버스 사용"""
    if design_mode:
        return CanvasSize(settings.DESIGN_CANVAS_WIDTH, settings.DESIGN_CANVAS_HEIGHT)
    return CanvasSize(settings.CANVAS_WIDTH, settings.CANVAS_HEIGHT)


def compute_fixed_grid(width: float, height: float) -> FixedGrid:
    """배너와 푸터 사이 영역에 가운데 정렬된 3x3 그리드"""
    canvas = normalize_canvas_size(width, height)
    cols, rows, gap = FIXED_GRID_COLS, FIXED_GRID_ROWS, FIXED_GRID_GAP

    area_width = canvas.width - 2 * MARGIN_X
    area_height = canvas.height - GRID_TOP - GRID_BOTTOM_OFFSET

    cell_size = math.floor(min(
        (area_width - gap * (cols - 1)) / cols,
        (area_height - gap * (rows - 1)) / rows,
    ))
    cell_size = max(cell_size, 1)

    total_width = cols * cell_size + gap * (cols - 1)
    total_height = rows * cell_size + gap * (rows - 1)
    offset_x = MARGIN_X + math.floor((area_width - total_width) / 2)
    offset_y = GRID_TOP + math.floor((area_height - total_height) / 2)

    cells = tuple(
        GridCell(
            x=int(offset_x + (i % cols) * (cell_size + gap)),
            y=int(offset_y + (i // cols) * (cell_size + gap)),
        )
        for i in range(cols * rows)
    )
    return FixedGrid(cols=cols, rows=rows, cell_size=cell_size, gap=gap, cells=cells)


def compute_dynamic_layout(item_count: int, width: float, height: float) -> DynamicLayout:
    """상품 수 구간별 열/행 수와 정사각형 아이템 크기

    구간: 1→1x1, 2→2x1, 3→3x1, 4→2x2, 5~6→3x2, 7~9→3x3, 10~12→4x3, 13+→4x⌈n/4⌉
    구간마다 상한이 있고, 최종 크기는 MIN_DYNAMIC_ITEM_SIZE 이상.
    """
    canvas = normalize_canvas_size(width, height)
    count = max(int(item_count), 1)

    aw = canvas.width - 2 * MARGIN_X
    ah = canvas.height - GRID_TOP - GRID_BOTTOM_OFFSET

    if count == 1:
        cols, rows = 1, 1
        size = min(380, aw * 0.9, ah * 0.8)
    elif count == 2:
        cols, rows = 2, 1
        size = min(300, (aw - 20) / 2)
    elif count == 3:
        cols, rows = 3, 1
        size = min(240, (aw - 40) / 3)
    elif count == 4:
        cols, rows = 2, 2
        size = min(220, (aw - 20) / 2, (ah - 20) / 2)
    elif count <= 6:
        cols, rows = 3, 2
        size = min(150, (aw - 60) / 3, (ah - 30) / 2)
    elif count <= 9:
        cols, rows = 3, 3
        size = min(130, (aw - 60) / 3, (ah - 60) / 3)
    elif count <= 12:
        cols, rows = 4, 3
        size = min(110, (aw - 90) / 4, (ah - 60) / 3)
    else:
        cols, rows = 4, math.ceil(count / 4)
        size = min(100, (aw - 90) / 4, (ah - (rows - 1) * 20) / rows)

    return DynamicLayout(
        cols=cols,
        rows=rows,
        item_size=max(MIN_DYNAMIC_ITEM_SIZE, size),
        available_width=aw,
        available_height=ah,
        margin_x=MARGIN_X,
        margin_y=GRID_TOP,
    )


def nearest_cell_index(grid: FixedGrid, position: Point) -> int:
    """유클리드 거리상 가장 가까운 셀 (동률이면 앞 인덱스)"""
    nearest_index = 0
    nearest_distance = math.inf
    for index, cell in enumerate(grid.cells):
        dx = position.x - cell.x
        dy = position.y - cell.y
        distance = dx * dx + dy * dy
        if distance < nearest_distance:
            nearest_distance = distance
            nearest_index = index
    return nearest_index


def clamp_to_canvas(value: float, extent: float, footprint: float) -> float:
    """[0, extent - footprint] 범위로 제한 (캔버스보다 크면 0)"""
    return max(0.0, min(value, extent - footprint))


def pointer_angle(pointer: Point, center: Point) -> float:
    """중심 기준 포인터 각도 (도 단위)"""
    return math.degrees(math.atan2(pointer.y - center.y, pointer.x - center.x))
