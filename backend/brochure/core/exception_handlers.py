"""
전역 예외 처리기

모든 에러를 ErrorResponse 봉투로 렌더링한다.
"""

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from brochure.core.config import settings
from brochure.core.exceptions import BrochureException, LayoutError
from brochure.core.responses import (
    ErrorCode,
    ValidationErrorDetail,
    create_error_response,
    create_validation_error_response,
)
from brochure.services.logging_service import logging_service


def _request_id(request: Request):
    return getattr(request.state, "request_id", None)


def _json(status_code: int, body: dict) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


async def brochure_exception_handler(request: Request, exc: BrochureException) -> JSONResponse:
    """BrochureException 계열 (레이아웃 엔진 예외 포함)"""
    request_id = _request_id(request)

    # 4xx 는 클라이언트 입력 문제이므로 traceback 없이 경고만
    if exc.status_code >= 500:
        logging_service.log_error(
            exc,
            "레이아웃 엔진 예외" if isinstance(exc, LayoutError) else "브로셔 예외",
            request_id=request_id,
            path=request.url.path,
            error_code=exc.error_code,
        )

    return _json(exc.status_code, create_error_response(
        message=exc.message,
        error_code=exc.error_code,
        details=exc.details,
        request_id=request_id
    ))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """라우팅 단계 404/405 및 HTTPException"""
    if exc.status_code == 404:
        message = "요청한 리소스를 찾을 수 없습니다"
    elif exc.status_code == 405:
        message = "지원하지 않는 HTTP 메서드입니다"
    else:
        message = str(exc.detail or "요청을 처리할 수 없습니다")

    return _json(exc.status_code, create_error_response(
        message=message,
        error_code=ErrorCode.for_status(exc.status_code),
        request_id=_request_id(request)
    ))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """요청 본문/쿼리 검증 실패: 필드별 오류 목록"""
    errors = []
    for error in exc.errors():
        # ("body", "status") → "status"
        location = [str(part) for part in error.get("loc", ())]
        field = ".".join(location[1:] if len(location) > 1 else location)
        errors.append(ValidationErrorDetail(field=field, message=error["msg"], value=error.get("input")))

    return _json(422, create_validation_error_response(errors, request_id=_request_id(request)))


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = _request_id(request)
    logging_service.log_error(exc, "예상치 못한 서버 에러", request_id=request_id, path=request.url.path)

    details = {"error_type": type(exc).__name__, "error_message": str(exc)} if settings.DEBUG else None
    return _json(500, create_error_response(
        message="서버 내부 오류가 발생했습니다. 잠시 후 다시 시도해주세요.",
        error_code=ErrorCode.INTERNAL_SERVER_ERROR,
        details=details,
        request_id=request_id
    ))
