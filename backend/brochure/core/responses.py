"""
API 응답 봉투(envelope) 스키마

레코드/에디터 라우트는 본문을 그대로 반환하고, 에러와 루트/헬스 응답만 봉투를 쓴다.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SuccessEnvelope(BaseModel):
    success: bool = True
    message: str
    data: Optional[Any] = None
    timestamp: datetime = Field(default_factory=_utcnow)
    request_id: Optional[str] = None


class ErrorResponse(BaseModel):
    """모든 에러 응답의 공통 형태"""

    success: bool = False
    error_code: str
    message: str
    details: Optional[Dict[str, Any]] = None
    timestamp: datetime = Field(default_factory=_utcnow)
    request_id: Optional[str] = None


class ValidationErrorDetail(BaseModel):
    field: str
    message: str
    value: Optional[Any] = None


class ValidationErrorResponse(ErrorResponse):
    error_code: str = "VALIDATION_ERROR"
    validation_errors: List[ValidationErrorDetail] = Field(default_factory=list)


class HealthData(BaseModel):
    status: str
    version: str
    environment: str
    uptime: float = Field(description="서버 실행 시간 (초)")
    services: Dict[str, str]


def create_success_response(message: str, data: Any = None, request_id: Optional[str] = None) -> Dict[str, Any]:
    return SuccessEnvelope(message=message, data=data, request_id=request_id).model_dump()


def create_error_response(
    message: str,
    error_code: str = "GENERAL_ERROR",
    details: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None
) -> Dict[str, Any]:
    return ErrorResponse(
        error_code=error_code,
        message=message,
        details=details,
        request_id=request_id
    ).model_dump()


def create_validation_error_response(
    validation_errors: List[ValidationErrorDetail],
    message: str = "입력 데이터 검증에 실패했습니다",
    request_id: Optional[str] = None
) -> Dict[str, Any]:
    return ValidationErrorResponse(
        message=message,
        validation_errors=validation_errors,
        request_id=request_id
    ).model_dump()


def create_health_response(
    status: str,
    version: str,
    environment: str,
    uptime: float,
    services: Dict[str, str],
    message: str = "브로셔 디자이너가 정상 작동 중입니다"
) -> Dict[str, Any]:
    health = HealthData(status=status, version=version, environment=environment, uptime=uptime, services=services)
    return SuccessEnvelope(message=message, data=health.model_dump()).model_dump()


class ErrorCode:
    """에러 코드 상수 (BrochureException 하위 클래스의 error_code 와 동일한 값)"""

    GENERAL_ERROR = "GENERAL_ERROR"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    RESOURCE_CONFLICT = "RESOURCE_CONFLICT"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    PERSISTENCE_ERROR = "PERSISTENCE_ERROR"

    BY_STATUS = {
        400: VALIDATION_ERROR,
        404: RESOURCE_NOT_FOUND,
        405: METHOD_NOT_ALLOWED,
        409: RESOURCE_CONFLICT,
        422: VALIDATION_ERROR,
        500: INTERNAL_SERVER_ERROR,
        503: PERSISTENCE_ERROR,
    }

    @classmethod
    def for_status(cls, status_code: int) -> str:
        return cls.BY_STATUS.get(status_code, cls.GENERAL_ERROR)
