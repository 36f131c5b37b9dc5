"""
구조화 로깅 서비스 (structlog, JSON 출력)

HTTP 요청 흐름, 처리되지 않은 에러, 에디터 세션 이벤트를 한 줄짜리 JSON 로그로 남긴다.
"""

import time
import traceback
from contextlib import asynccontextmanager
from functools import wraps
from typing import Optional

import structlog

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(ensure_ascii=False),
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger("brochure")


class LoggingService:
    """요청/에러/에디터 이벤트 로깅"""

    def log_request(self, method: str, path: str, request_id: str, **fields):
        logger.info("request_started", method=method, path=path, request_id=request_id, **fields)

    def log_response(self, method: str, path: str, request_id: str, status_code: int, duration_ms: float):
        log = logger.warning if status_code >= 500 else logger.info
        log(
            "request_finished",
            method=method,
            path=path,
            request_id=request_id,
            status_code=status_code,
            duration_ms=round(duration_ms, 2),
        )

    def log_slow_request(self, method: str, path: str, request_id: str, duration_ms: float, threshold_ms: float):
        """내보내기 등 임계값을 넘긴 요청"""
        logger.warning(
            "slow_request",
            method=method,
            path=path,
            request_id=request_id,
            duration_ms=round(duration_ms, 2),
            threshold_ms=threshold_ms,
        )

    def log_error(self, error: BaseException, context: str, request_id: Optional[str] = None, **fields):
        logger.error(
            "error",
            context=context,
            error_type=type(error).__name__,
            error_message=str(error),
            request_id=request_id,
            traceback="".join(traceback.format_exception(type(error), error, error.__traceback__)),
            **fields
        )

    def log_editor_event(self, session_id: str, event: str, **fields):
        """세션 열기/닫기, 캠페인 저장, 내보내기"""
        logger.info("editor_event", session_id=session_id, editor_event=event, **fields)

    @asynccontextmanager
    async def editor_operation(self, operation: str, **fields):
        """에디터 작업 소요 시간 기록. 실패 시 기록 후 예외 전파"""
        start = time.perf_counter()
        try:
            yield
        except Exception as e:
            logger.warning(
                "editor_operation_failed",
                operation=operation,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
                error_type=type(e).__name__,
                **fields
            )
            raise
        logger.info(
            "editor_operation",
            operation=operation,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
            **fields
        )


logging_service = LoggingService()


def log_api_call(operation: str):
    """라우트 핸들러 소요 시간 로깅 데코레이터"""
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            async with logging_service.editor_operation(operation, handler=func.__name__):
                return await func(*args, **kwargs)
        return wrapper
    return decorator
