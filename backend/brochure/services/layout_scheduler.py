"""
자동 배치 디바운스 스케줄러

연속된 트리거는 마지막 것 하나만 실행된다 (취소 후 재예약).
실행 시점에 제스처가 진행 중이면 같은 지연으로 다시 예약해
제스처 도중 배치 저장소가 바뀌지 않도록 한다.
"""

import asyncio
from typing import Callable, Optional

from brochure.utils.logger import get_logger

logger = get_logger(__name__)


class DebouncedLayoutScheduler:
    """asyncio 타이머 기반 단일 대기 작업"""

    def __init__(
        self,
        callback: Callable[[], object],
        is_busy: Callable[[], bool] = lambda: False
    ):
        self._callback = callback
        self._is_busy = is_busy
        self._handle: Optional[asyncio.TimerHandle] = None
        self._delay_ms: int = 0
        self.run_count = 0

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, delay_ms: int) -> None:
        """기존 예약을 취소하고 delay_ms 후 실행 예약 (실행 중인 이벤트 루프 필요)"""
        loop = asyncio.get_running_loop()
        self.cancel()
        self._delay_ms = max(int(delay_ms), 0)
        self._handle = loop.call_later(self._delay_ms / 1000, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def flush(self) -> bool:
        """대기 중인 작업을 즉시 실행. 실행했으면 True"""
        if self._handle is None:
            return False
        self.cancel()
        self._run()
        return True

    def _fire(self) -> None:
        self._handle = None
        if self._is_busy():
            logger.debug("제스처 진행 중, 자동 배치 재예약", context={"delay_ms": self._delay_ms})
            self._handle = asyncio.get_running_loop().call_later(self._delay_ms / 1000, self._fire)
            return
        self._run()

    def _run(self) -> None:
        self.run_count += 1
        try:
            self._callback()
        except Exception as e:
            # 타이머 콜백 예외가 이벤트 루프로 전파되지 않도록 기록만 한다
            logger.error("예약된 자동 배치 실패", exc_info=e, context={"error": str(e)})
