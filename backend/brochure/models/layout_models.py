# 레이아웃 엔진 값 타입
# 캔버스 로컬 픽셀 좌표계 (좌상단 원점, y 아래 방향)

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


# ===== Enum 정의 =====

class ElementKind(str, Enum):
    """자유 배치 요소 (브로셔당 하나씩)"""
    LOGO = "logo"
    COMPANY_NAME = "companyName"


class InteractionKind(str, Enum):
    """현재 진행 중인 조작 종류"""
    IDLE = "idle"
    DRAGGING_ELEMENT = "dragging_element"
    DRAGGING_PRODUCT = "dragging_product"
    ROTATING_PRODUCT = "rotating_product"
    RESIZING_PRODUCT = "resizing_product"
    DRAGGING_DATE = "dragging_date"
    ROTATING_LOGO = "rotating_logo"
    RESIZING_LOGO = "resizing_logo"


class PointerTarget(str, Enum):
    """pointer_down 대상"""
    ELEMENT = "element"
    PRODUCT = "product"
    PRODUCT_ROTATE_HANDLE = "product_rotate"
    PRODUCT_RESIZE_HANDLE = "product_resize"
    DATE_LABEL = "date_label"
    LOGO_ROTATE_HANDLE = "logo_rotate"
    LOGO_RESIZE_HANDLE = "logo_resize"


class ExportFormat(str, Enum):
    PNG = "png"
    JPEG = "jpeg"
    PDF = "pdf"


# ===== 기하 값 타입 =====

@dataclass
class Point:
    x: float = 0.0
    y: float = 0.0

    def copy(self) -> "Point":
        return Point(self.x, self.y)

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass
class ScalePair:
    """독립 배율 (실사용에서는 항상 동일 값)"""
    scale_x: float = 1.0
    scale_y: float = 1.0

    @classmethod
    def uniform(cls, value: float) -> "ScalePair":
        return cls(value, value)

    def to_dict(self) -> Dict[str, float]:
        return {"scaleX": self.scale_x, "scaleY": self.scale_y}


@dataclass(frozen=True)
class CanvasSize:
    width: float
    height: float


@dataclass(frozen=True)
class GridCell:
    """고정 그리드 셀 좌상단 좌표"""
    x: int
    y: int

    def to_point(self) -> Point:
        return Point(float(self.x), float(self.y))


@dataclass(frozen=True)
class FixedGrid:
    """항상 3x3, 셀은 행 우선 순서"""
    cols: int
    rows: int
    cell_size: int
    gap: int
    cells: Tuple[GridCell, ...]


@dataclass(frozen=True)
class DynamicLayout:
    """자동 배치용 가변 그리드"""
    cols: int
    rows: int
    item_size: float
    available_width: float
    available_height: float
    margin_x: float
    margin_y: float


# ===== 배치 상태 =====

@dataclass
class CanvasItem:
    """브로셔에 배치된 상품 하나 (식별자 = 캠페인-상품 레코드 id)"""
    item_id: int
    position: Point = field(default_factory=Point)
    rotation: float = 0.0
    scale: ScalePair = field(default_factory=ScalePair)
    page: int = 1
    grid_index: Optional[int] = None

    # 저장/렌더링에 필요한 상품 정보
    product_id: Optional[int] = None
    name: str = ""
    image_url: Optional[str] = None
    original_price: Optional[float] = None
    quantity: int = 1
    discount_percent: float = 0.0
    new_price: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "itemId": self.item_id,
            "productId": self.product_id,
            "name": self.name,
            "imageUrl": self.image_url,
            "originalPrice": self.original_price,
            "newPrice": self.new_price,
            "discountPercent": self.discount_percent,
            "quantity": self.quantity,
            "position": self.position.to_dict(),
            "rotation": self.rotation,
            **self.scale.to_dict(),
            "pageNumber": self.page,
            "gridIndex": self.grid_index,
        }


@dataclass
class FreeElement:
    """로고 / 회사명 라벨. 회전과 배율은 로고만 사용"""
    kind: ElementKind
    position: Point
    rotation: float = 0.0
    scale: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"kind": self.kind.value, "position": self.position.to_dict()}
        if self.kind == ElementKind.LOGO:
            data["rotation"] = self.rotation
            data["scale"] = self.scale
        return data


@dataclass(frozen=True)
class PositionUpdate:
    """제스처 종료 후 저장소에 반영할 위치"""
    item_id: int
    x: float
    y: float

    def to_dict(self) -> Dict[str, float]:
        return {"itemId": self.item_id, "x": self.x, "y": self.y}
