"""
요청 ID 부여 및 요청/응답 로깅 미들웨어
"""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from brochure.services.logging_service import logging_service

# PDF/ZIP 내보내기가 보통 여기에 걸린다
SLOW_REQUEST_THRESHOLD_MS = 1000


class LoggingMiddleware(BaseHTTPMiddleware):
    """HTTP 요청마다 X-Request-ID 를 부여하고 시작/종료를 기록"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request_id
        path = request.url.path

        logging_service.log_request(
            request.method,
            path,
            request_id,
            client=self._client_address(request),
            query=str(request.query_params) or None,
        )

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logging_service.log_error(e, "요청 처리 중 처리되지 않은 예외", request_id=request_id, path=path)
            raise

        duration_ms = (time.perf_counter() - started) * 1000
        logging_service.log_response(request.method, path, request_id, response.status_code, duration_ms)
        if duration_ms > SLOW_REQUEST_THRESHOLD_MS:
            logging_service.log_slow_request(request.method, path, request_id, duration_ms, SLOW_REQUEST_THRESHOLD_MS)

        response.headers["X-Request-ID"] = request_id
        return response

    @staticmethod
    def _client_address(request: Request) -> str:
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()
        return request.client.host if request.client else "unknown"
