"""
사용자 정의 예외 클래스들
"""

from typing import Any, Dict, Optional


class BrochureException(Exception):
    """브로셔 디자이너 기본 예외 클래스"""

    def __init__(
        self,
        message: str,
        error_code: str = "GENERAL_ERROR",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(BrochureException):
    """입력 검증 실패"""

    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=422,
            details={"field": field} if field else {},
            **kwargs
        )


class ResourceNotFoundError(BrochureException):
    """리소스를 찾을 수 없음"""

    def __init__(self, resource: str, resource_id: Optional[Any] = None, **kwargs):
        message = f"{resource}을(를) 찾을 수 없습니다"
        if resource_id is not None:
            message += f": {resource_id}"

        super().__init__(
            message=message,
            error_code="RESOURCE_NOT_FOUND",
            status_code=404,
            details={"resource": resource, "resource_id": resource_id},
            **kwargs
        )


class ConflictError(BrochureException):
    """리소스 충돌"""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message=message,
            error_code="RESOURCE_CONFLICT",
            status_code=409,
            **kwargs
        )


class DatabaseError(BrochureException):
    """데이터베이스 관련 오류"""

    def __init__(self, message: str = "데이터베이스 오류가 발생했습니다", **kwargs):
        super().__init__(
            message=message,
            error_code="DATABASE_ERROR",
            status_code=500,
            **kwargs
        )


class FileProcessingError(BrochureException):
    """파일 처리 오류"""

    def __init__(self, message: str, filename: Optional[str] = None, **kwargs):
        super().__init__(
            message=message,
            error_code="FILE_PROCESSING_ERROR",
            status_code=422,
            details={"filename": filename} if filename else {},
            **kwargs
        )


class ConfigurationError(BrochureException):
    """설정 오류"""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            status_code=500,
            **kwargs
        )


# ===== 레이아웃 엔진 예외 =====

class LayoutError(BrochureException):
    """레이아웃 엔진 기본 예외"""

    def __init__(self, message: str, error_code: str = "LAYOUT_ERROR", status_code: int = 422, **kwargs):
        super().__init__(message=message, error_code=error_code, status_code=status_code, **kwargs)


class GeometryError(LayoutError):
    """잘못된 캔버스 치수 (0 이하, NaN 등)"""

    def __init__(self, message: str, width: Any = None, height: Any = None, **kwargs):
        super().__init__(
            message=message,
            error_code="GEOMETRY_ERROR",
            details={"width": width, "height": height},
            **kwargs
        )


class OutOfRangeError(LayoutError):
    """페이지/그리드 셀 인덱스가 유효 범위를 벗어남"""

    def __init__(self, field: str, value: Any, minimum: int, maximum: int, **kwargs):
        super().__init__(
            message=f"{field} 값이 범위를 벗어났습니다: {value} (허용 {minimum}..{maximum})",
            error_code="OUT_OF_RANGE",
            details={"field": field, "value": value, "min": minimum, "max": maximum},
            **kwargs
        )
        self.field = field
        self.value = value
        self.minimum = minimum
        self.maximum = maximum

    def clamped(self) -> int:
        """가장 가까운 유효 값"""
        return max(self.minimum, min(int(self.value), self.maximum))


class ItemLookupError(LayoutError, LookupError):
    """캔버스에 더 이상 존재하지 않는 아이템 참조"""

    def __init__(self, item_id: Any, **kwargs):
        super().__init__(
            message=f"캔버스 아이템을 찾을 수 없습니다: {item_id}",
            error_code="ITEM_NOT_FOUND",
            status_code=404,
            details={"item_id": item_id},
            **kwargs
        )
        self.item_id = item_id


class PersistenceError(LayoutError):
    """외부 저장소 호출 실패"""

    def __init__(self, operation: str, message: Optional[str] = None, **kwargs):
        if not message:
            message = f"저장소 작업에 실패했습니다: {operation}"
        super().__init__(
            message=message,
            error_code="PERSISTENCE_ERROR",
            status_code=503,
            details={"operation": operation},
            **kwargs
        )
        self.operation = operation
