"""
브로셔 기하 계산 단위 테스트
"""

import math

import pytest

from brochure.core.exceptions import GeometryError
from brochure.models.layout_models import Point
from brochure.services.brochure_geometry import (
    MIN_CANVAS_HEIGHT,
    MIN_CANVAS_WIDTH,
    MIN_DYNAMIC_ITEM_SIZE,
    canvas_size_for_mode,
    clamp_to_canvas,
    compute_dynamic_layout,
    compute_fixed_grid,
    nearest_cell_index,
    normalize_canvas_size,
    pointer_angle,
    validate_canvas_size,
)


@pytest.mark.unit
class TestFixedGrid:
    """고정 3x3 그리드 테스트"""

    def test_standard_canvas_cells(self):
        """600x800 캔버스 셀 좌표"""
        # When
        grid = compute_fixed_grid(600, 800)

        # Then
        assert grid.cols == 3 and grid.rows == 3
        assert grid.cell_size == 164
        assert grid.gap == 14
        assert [cell.x for cell in grid.cells[:3]] == [40, 218, 396]
        assert [grid.cells[i].y for i in (0, 3, 6)] == [182, 360, 538]

    def test_design_canvas_cells(self):
        """디자인 모드 400x533 캔버스 셀 좌표"""
        # When
        grid = compute_fixed_grid(400, 533)

        # Then
        assert grid.cell_size == 76
        assert [cell.x for cell in grid.cells[:3]] == [72, 162, 252]
        assert [grid.cells[i].y for i in (0, 3, 6)] == [180, 270, 360]

    def test_cells_are_row_major(self):
        """셀 인덱스는 행 우선 순서"""
        grid = compute_fixed_grid(600, 800)

        assert (grid.cells[4].x, grid.cells[4].y) == (218, 360)
        assert grid.cells[8].x == 396 and grid.cells[8].y == 538

    def test_same_input_same_output(self):
        """순수 함수: 같은 입력은 같은 결과"""
        assert compute_fixed_grid(600, 800) == compute_fixed_grid(600, 800)

    def test_degenerate_canvas_is_clamped(self):
        """0/NaN 크기는 최소 캔버스로 보정되고 좌표는 유한"""
        # When
        grid = compute_fixed_grid(0, float("nan"))

        # Then
        assert grid.cell_size >= 1
        assert all(math.isfinite(cell.x) and math.isfinite(cell.y) for cell in grid.cells)


@pytest.mark.unit
class TestDynamicLayout:
    """가변 그리드 구간 테스트"""

    @pytest.mark.parametrize("count,expected", [
        (1, (1, 1)),
        (2, (2, 1)),
        (3, (3, 1)),
        (4, (2, 2)),
        (5, (3, 2)),
        (6, (3, 2)),
        (7, (3, 3)),
        (9, (3, 3)),
        (10, (4, 3)),
        (12, (4, 3)),
        (13, (4, 4)),
        (17, (4, 5)),
    ])
    def test_bucket_table(self, count, expected):
        """상품 수 구간별 열/행"""
        layout = compute_dynamic_layout(count, 600, 800)

        assert (layout.cols, layout.rows) == expected

    def test_four_items_use_two_by_two_bucket(self):
        """4개는 2x2 구간 공식으로 크기 계산"""
        # When
        layout = compute_dynamic_layout(4, 600, 800)

        # Then
        assert (layout.cols, layout.rows) == (2, 2)
        assert layout.item_size == 220

    def test_single_item_size(self):
        layout = compute_dynamic_layout(1, 600, 800)

        assert layout.item_size == 380

    def test_many_items_size_cap(self):
        layout = compute_dynamic_layout(13, 600, 800)

        assert layout.item_size == 100

    def test_minimum_item_size_floor(self):
        """작은 캔버스에서도 최소 아이템 크기 보장"""
        layout = compute_dynamic_layout(9, 400, 533)

        assert layout.item_size == MIN_DYNAMIC_ITEM_SIZE

    def test_usable_area_and_margins(self):
        layout = compute_dynamic_layout(3, 600, 800)

        assert layout.available_width == 520
        assert layout.available_height == 524
        assert layout.margin_x == 40
        assert layout.margin_y == 180

    def test_zero_items_treated_as_one(self):
        layout = compute_dynamic_layout(0, 600, 800)

        assert (layout.cols, layout.rows) == (1, 1)


@pytest.mark.unit
class TestCanvasSize:
    """캔버스 크기 검증/보정 테스트"""

    def test_validate_rejects_non_positive(self):
        with pytest.raises(GeometryError) as exc_info:
            validate_canvas_size(0, 800)

        assert exc_info.value.details == {"width": 0, "height": 800}

    def test_validate_rejects_nan(self):
        with pytest.raises(GeometryError):
            validate_canvas_size(600, float("nan"))

    def test_validate_accepts_valid_size(self):
        canvas = validate_canvas_size(600, 800)

        assert (canvas.width, canvas.height) == (600, 800)

    def test_normalize_clamps_to_minimum(self):
        canvas = normalize_canvas_size(-5, None)

        assert (canvas.width, canvas.height) == (MIN_CANVAS_WIDTH, MIN_CANVAS_HEIGHT)

    def test_canvas_size_for_mode(self):
        assert canvas_size_for_mode(False).width == 600
        assert canvas_size_for_mode(True).height == 533


@pytest.mark.unit
class TestGeometryHelpers:
    """스냅/클램프/각도 헬퍼 테스트"""

    def test_nearest_cell_index(self):
        grid = compute_fixed_grid(600, 800)

        assert nearest_cell_index(grid, Point(0, 0)) == 0
        assert nearest_cell_index(grid, Point(230, 350)) == 4
        assert nearest_cell_index(grid, Point(600, 800)) == 8

    def test_nearest_cell_tie_prefers_lower_index(self):
        """두 셀의 정확히 중간이면 앞 인덱스"""
        grid = compute_fixed_grid(600, 800)

        assert nearest_cell_index(grid, Point(129, 182)) == 0

    def test_clamp_to_canvas(self):
        assert clamp_to_canvas(-10, 600, 132) == 0
        assert clamp_to_canvas(500, 600, 132) == 468
        assert clamp_to_canvas(100, 600, 132) == 100

    def test_clamp_when_footprint_exceeds_extent(self):
        assert clamp_to_canvas(10, 100, 132) == 0

    def test_pointer_angle(self):
        center = Point(0, 0)

        assert pointer_angle(Point(10, 0), center) == 0
        assert pointer_angle(Point(0, 10), center) == pytest.approx(90)
        assert pointer_angle(Point(-10, 0), center) == pytest.approx(180)
