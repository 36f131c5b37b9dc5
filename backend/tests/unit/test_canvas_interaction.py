"""
InteractionMachine 단위 테스트
"""

import pytest

from brochure.models.layout_models import (
    CanvasSize,
    ElementKind,
    InteractionKind,
    Point,
    PositionUpdate,
)
from brochure.services.canvas_interaction import InteractionMachine
from brochure.services.placement_store import PlacementStore


@pytest.fixture
def store():
    return PlacementStore(CanvasSize(600, 800))


@pytest.fixture
def machine(store):
    return InteractionMachine(store)


@pytest.mark.unit
class TestProductDrag:
    """상품 드래그 / 스냅 / 교환 테스트"""

    def test_drag_follows_pointer_centered(self, store, machine):
        """위치 = 포인터 - 66"""
        # Given
        store.add_item(1)
        machine.begin_product_drag(1)

        # When
        machine.pointer_move(Point(300, 400))

        # Then
        assert store.get_position(1) == Point(234, 334)
        assert machine.kind == InteractionKind.DRAGGING_PRODUCT

    def test_drag_is_clamped_to_canvas(self, store, machine):
        store.add_item(1)
        machine.begin_product_drag(1)

        machine.pointer_move(Point(2000, -50))

        assert store.get_position(1) == Point(468, 0)

    def test_release_snaps_to_nearest_cell(self, store, machine):
        # Given
        store.add_item(1)
        machine.begin_product_drag(1)
        machine.pointer_move(Point(300, 400))

        # When
        updates = machine.pointer_up()

        # Then
        assert updates == [PositionUpdate(1, 218, 360)]
        assert store.get_grid_index(1) == 4
        assert machine.kind == InteractionKind.IDLE

    def test_release_onto_occupied_cell_swaps(self, store, machine):
        """점유된 셀에 놓으면 기존 상품이 이전 셀로 이동"""
        # Given
        store.add_item(1)  # cell 0
        store.add_item(2)  # cell 1
        machine.begin_product_drag(1)
        machine.pointer_move(Point(218 + 66, 182 + 66))

        # When
        updates = machine.pointer_up()

        # Then
        assert updates == [PositionUpdate(1, 218, 182), PositionUpdate(2, 40, 182)]
        assert store.get_grid_index(1) == 1
        assert store.get_grid_index(2) == 0

    def test_swap_with_ungridded_item_keeps_occupant_position(self, store, machine):
        """끌던 상품에 이전 셀이 없으면 기존 상품은 위치 유지, 셀만 해제"""
        # Given
        store.add_item(1, saved_x=300, saved_y=600)
        store.add_item(2)  # cell 0
        machine.begin_product_drag(1)
        machine.pointer_move(Point(40 + 66, 182 + 66))

        # When
        updates = machine.pointer_up()

        # Then
        assert updates == [PositionUpdate(1, 40, 182)]
        assert store.get_grid_index(2) is None
        assert store.get_position(2) == Point(40, 182)

    def test_no_two_items_share_a_cell(self, store, machine):
        for item_id in (1, 2, 3):
            store.add_item(item_id)
        machine.begin_product_drag(3)
        machine.pointer_move(Point(40 + 66, 182 + 66))

        machine.pointer_up()

        cells = [item.grid_index for item in store.items()]
        assert len(cells) == len(set(cells))

    def test_pointer_leave_finalizes_like_pointer_up(self, store, machine):
        store.add_item(1)
        machine.begin_product_drag(1)
        machine.pointer_move(Point(300, 400))

        updates = machine.pointer_leave()

        assert updates == [PositionUpdate(1, 218, 360)]

    def test_unknown_item_abandons_gesture(self, machine):
        assert machine.begin_product_drag(999) is False
        assert machine.kind == InteractionKind.IDLE

    def test_item_removed_mid_gesture(self, store, machine):
        """제스처 도중 삭제된 아이템은 조용히 중단"""
        # Given
        store.add_item(1)
        machine.begin_product_drag(1)
        store.remove_item(1)

        # When
        moved = machine.pointer_move(Point(100, 100))

        # Then
        assert moved is False
        assert machine.kind == InteractionKind.IDLE
        assert machine.pointer_up() == []

    def test_idle_events_are_noops(self, machine):
        assert machine.pointer_move(Point(1, 1)) is False
        assert machine.pointer_up() == []


@pytest.mark.unit
class TestRotateAndResize:
    """회전 / 크기 조절 테스트"""

    def test_product_rotation_accumulates(self, store, machine):
        """중심 (x+66, y+66) 기준 각도 변화량 누적"""
        # Given
        store.add_item(1)  # (40, 182) → 중심 (106, 248)
        machine.begin_product_rotate(1, Point(206, 248))

        # When
        machine.pointer_move(Point(106, 348))
        machine.pointer_move(Point(6, 248))

        # Then
        assert store.get_rotation(1) == pytest.approx(180)

    def test_product_release_after_rotate_emits_no_updates(self, store, machine):
        store.add_item(1)
        machine.begin_product_rotate(1, Point(206, 248))
        machine.pointer_move(Point(106, 348))

        assert machine.pointer_up() == []
        assert store.get_grid_index(1) == 0

    def test_product_resize_uses_average_delta(self, store, machine):
        # Given
        store.add_item(1)
        machine.begin_product_resize(1, Point(0, 0))

        # When
        machine.pointer_move(Point(75, 75))

        # Then
        scale = store.get_scale(1)
        assert scale.scale_x == pytest.approx(1.5)
        assert scale.scale_x == scale.scale_y

    def test_product_resize_floor(self, store, machine):
        store.add_item(1)
        machine.begin_product_resize(1, Point(0, 0))

        machine.pointer_move(Point(-300, -300))

        assert store.get_scale(1).scale_x == pytest.approx(0.1)

    def test_logo_rotation_around_logo_center(self, store, machine):
        """로고 중심 (x+32, y+32)"""
        machine.begin_logo_rotate(Point(164, 64))

        machine.pointer_move(Point(64, 164))

        assert store.element(ElementKind.LOGO).rotation == pytest.approx(90)

    def test_logo_resize_floor(self, store, machine):
        machine.begin_logo_resize(Point(0, 0))

        machine.pointer_move(Point(-500, -500))

        assert store.element(ElementKind.LOGO).scale == pytest.approx(0.2)


@pytest.mark.unit
class TestElementAndDateDrag:
    """자유 요소 / 날짜 라벨 드래그 테스트"""

    def test_element_drag(self, store, machine):
        """위치 = 포인터 - 25, 50px 기준 클램프"""
        machine.begin_element_drag(ElementKind.COMPANY_NAME)

        machine.pointer_move(Point(100, 100))
        assert store.element(ElementKind.COMPANY_NAME).position == Point(75, 75)

        machine.pointer_move(Point(1000, 1000))
        assert store.element(ElementKind.COMPANY_NAME).position == Point(550, 750)

    def test_element_drag_emits_no_updates(self, machine):
        machine.begin_element_drag(ElementKind.LOGO)
        machine.pointer_move(Point(100, 100))

        assert machine.pointer_up() == []

    def test_date_drag_keeps_grab_offset(self, store, machine):
        # Given: 기본 위치 (320, 20) 에서 (10, 5) 지점을 잡음
        machine.begin_date_drag(1, Point(330, 25))

        # When
        machine.pointer_move(Point(100, 100))

        # Then
        assert store.date_position(1) == Point(90, 95)

    def test_date_drag_clamped(self, store, machine):
        machine.begin_date_drag(1, Point(330, 25))

        machine.pointer_move(Point(1000, 1000))

        assert store.date_position(1) == Point(480, 770)

    def test_new_gesture_replaces_active_one(self, store, machine):
        """동시에 두 조작은 활성화될 수 없음"""
        store.add_item(1)
        machine.begin_product_drag(1)

        machine.begin_element_drag(ElementKind.LOGO)

        assert machine.kind == InteractionKind.DRAGGING_ELEMENT
        assert machine.describe() == {"kind": machine.kind.value, "element": "logo"}

    def test_new_gesture_snaps_unfinished_drag(self, store, machine):
        """pointer_up 없이 새 제스처가 시작되면 이전 드래그를 스냅"""
        # Given
        store.add_item(1)
        store.add_item(2)  # cell 1
        machine.begin_product_drag(1)
        machine.pointer_move(Point(300, 400))

        # When
        machine.begin_product_drag(2)

        # Then
        assert store.get_position(1) == Point(218, 360)
        assert store.get_grid_index(1) == 4
        assert machine.describe() == {"kind": "dragging_product", "itemId": 2}

    def test_rekey_active_gesture(self, store, machine):
        store.add_item(-1)
        machine.begin_product_drag(-1)
        store.rekey_items({-1: 100})

        machine.rekey({-1: 100})
        machine.pointer_move(Point(300, 400))

        assert machine.pointer_up() == [PositionUpdate(100, 218, 360)]
