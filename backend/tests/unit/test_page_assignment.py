"""
페이지/상품 배정 관리 단위 테스트
"""

import pytest

from brochure.core.exceptions import OutOfRangeError
from brochure.models.layout_models import CanvasSize
from brochure.services.page_assignment import (
    DropZoneState,
    PageAssignmentManager,
    PageDropZoneTracker,
)
from brochure.services.placement_store import PlacementStore


@pytest.fixture
def store():
    return PlacementStore(CanvasSize(600, 800), page_count=1)


@pytest.fixture
def relayout_calls():
    return []


@pytest.fixture
def manager(store, relayout_calls):
    return PageAssignmentManager(store, relayout=lambda: relayout_calls.append(True), max_pages=6)


@pytest.mark.unit
class TestPageAssignmentManager:
    """페이지 배정 테스트 클래스"""

    def test_add_page(self, manager, store):
        assert manager.add_page() == 2
        assert store.page_count == 2

    def test_remove_last_remaining_page_is_rejected(self, manager, store):
        assert manager.remove_page() is False
        assert store.page_count == 1

    def test_remove_page_migrates_products(self, manager, store):
        """삭제된 페이지의 상품은 새 마지막 페이지로"""
        # Given
        manager.add_page()
        manager.add_page()
        store.add_item(1, page=3)
        store.add_item(2, page=2)

        # When
        removed = manager.remove_page()

        # Then
        assert removed is True
        assert store.page_count == 2
        assert store.get_page(1) == 2
        assert store.get_page(2) == 2

    def test_move_product_triggers_relayout(self, manager, store, relayout_calls):
        # Given
        manager.add_page()
        store.add_item(1)

        # When
        page = manager.move_product_to_page(1, 2)

        # Then
        assert page == 2
        assert store.get_page(1) == 2
        assert relayout_calls == [True]

    def test_move_product_clamps_page(self, manager, store):
        manager.add_page()
        store.add_item(1)

        assert manager.move_product_to_page(1, 9) == 2
        assert manager.move_product_to_page(1, 0) == 1

    def test_distribute_nine_per_page(self, manager, store):
        """인덱스 i → min(i // 9 + 1, page_count)"""
        # Given
        for item_id in range(1, 21):
            store.add_item(item_id)
        store.set_page_count(2)

        # When
        assignments = manager.distribute_products_across_pages(2)

        # Then
        assert [assignments[i] for i in range(1, 10)] == [1] * 9
        assert [assignments[i] for i in range(10, 21)] == [2] * 11

    def test_distribute_is_idempotent(self, manager, store):
        for item_id in range(1, 12):
            store.add_item(item_id)
        store.set_page_count(2)

        first = manager.distribute_products_across_pages(2)
        second = manager.distribute_products_across_pages(2)

        assert first == second

    def test_distribute_clamps_page_count(self, manager, store):
        for item_id in range(1, 12):
            store.add_item(item_id)

        assignments = manager.distribute_products_across_pages(5)

        assert set(assignments.values()) == {1}

    def test_set_page_count_redistributes(self, manager, store):
        # Given
        for item_id in range(1, 11):
            store.add_item(item_id)

        # When
        page_count = manager.set_page_count(2)

        # Then
        assert page_count == 2
        assert store.get_page(10) == 2

    def test_set_page_count_clamped_to_selector_range(self, manager, store):
        assert manager.set_page_count(10) == 6
        assert manager.set_page_count(0) == 1
        assert store.page_count == 1

    def test_store_rejects_invalid_page_directly(self, store):
        store.add_item(1)

        with pytest.raises(OutOfRangeError):
            store.set_page(1, 2)


@pytest.mark.unit
class TestPageDropZoneTracker:
    """페이지 드롭 영역 테스트 클래스"""

    @pytest.fixture
    def tracker(self, manager, store):
        manager.add_page()
        store.add_item(7)
        return PageDropZoneTracker(manager)

    def test_drag_enter_and_leave(self, tracker):
        # When
        tracker.drag_enter(2)

        # Then
        assert tracker.state(2) == DropZoneState.DRAG_OVER
        assert tracker.state(1) == DropZoneState.IDLE

        tracker.drag_leave(2)
        assert tracker.state(2) == DropZoneState.IDLE

    def test_drop_moves_product(self, tracker, store, relayout_calls):
        # Given
        tracker.drag_enter(2)

        # When
        moved = tracker.drop(2, "7")

        # Then
        assert moved == 7
        assert store.get_page(7) == 2
        assert tracker.target_page is None
        assert relayout_calls == [True]

    @pytest.mark.parametrize("payload", [None, "", "abc", "0"])
    def test_invalid_payload_is_ignored(self, tracker, store, payload):
        tracker.drag_enter(2)

        assert tracker.drop(2, payload) is None
        assert tracker.target_page is None
        assert store.get_page(7) == 1

    def test_unknown_item_is_ignored(self, tracker):
        assert tracker.drop(2, "999") is None

    def test_parse_payload(self):
        assert PageDropZoneTracker.parse_payload(" 12 ") == 12
        assert PageDropZoneTracker.parse_payload(-3) == -3
