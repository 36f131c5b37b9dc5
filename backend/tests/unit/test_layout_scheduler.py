"""
자동 배치 디바운스 스케줄러 단위 테스트
"""

import asyncio

import pytest

from brochure.services.layout_scheduler import DebouncedLayoutScheduler


@pytest.mark.unit
class TestDebouncedLayoutScheduler:
    """디바운스 스케줄러 테스트 클래스"""

    async def test_burst_runs_once(self):
        """연속 예약은 마지막 것 하나만 실행"""
        # Given
        calls = []
        scheduler = DebouncedLayoutScheduler(lambda: calls.append(True))

        # When
        for _ in range(5):
            scheduler.schedule(10)
        await asyncio.sleep(0.1)

        # Then
        assert calls == [True]
        assert scheduler.pending is False

    async def test_cancel(self):
        calls = []
        scheduler = DebouncedLayoutScheduler(lambda: calls.append(True))

        scheduler.schedule(10)
        scheduler.cancel()
        await asyncio.sleep(0.05)

        assert calls == []

    async def test_flush_runs_immediately(self):
        calls = []
        scheduler = DebouncedLayoutScheduler(lambda: calls.append(True))
        scheduler.schedule(1000)

        assert scheduler.flush() is True
        assert calls == [True]
        assert scheduler.flush() is False

    async def test_rearms_while_busy(self):
        """제스처 진행 중에는 실행하지 않고 다시 예약"""
        # Given
        calls = []
        busy = [True]
        scheduler = DebouncedLayoutScheduler(lambda: calls.append(True), is_busy=lambda: busy[0])

        # When
        scheduler.schedule(10)
        await asyncio.sleep(0.05)

        # Then
        assert calls == []
        assert scheduler.pending is True

        busy[0] = False
        await asyncio.sleep(0.05)
        assert calls == [True]

    async def test_callback_error_is_logged_not_raised(self):
        def failing():
            raise RuntimeError("boom")

        scheduler = DebouncedLayoutScheduler(failing)

        scheduler.schedule(0)
        await asyncio.sleep(0.02)

        assert scheduler.run_count == 1
        assert scheduler.pending is False

    def test_schedule_requires_running_loop(self):
        scheduler = DebouncedLayoutScheduler(lambda: None)

        with pytest.raises(RuntimeError):
            scheduler.schedule(10)
