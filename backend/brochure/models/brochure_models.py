# 브로셔 레코드 스키마
# JSON 은 camelCase, 값이 없는 필드는 생략하지 않고 null

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """camelCase 별칭 + ORM 객체 변환"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ===== 사용자 =====

class UserCreate(CamelModel):
    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1)
    name: str = Field(min_length=1)


class UserRead(CamelModel):
    """비밀번호는 응답에 포함하지 않음"""
    id: int
    username: str
    name: str


# ===== 캠페인 =====

class CampaignBase(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    status: str = Field(default="draft", pattern="^(draft|active|completed)$")
    template_id: Optional[int] = None
    logo_id: Optional[int] = None
    company_name: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    valid_until: Optional[str] = None
    page_count: int = Field(default=1, ge=1)


class CampaignCreate(CampaignBase):
    user_id: int


class CampaignUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    status: Optional[str] = Field(default=None, pattern="^(draft|active|completed)$")
    template_id: Optional[int] = None
    logo_id: Optional[int] = None
    company_name: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    valid_until: Optional[str] = None
    page_count: Optional[int] = Field(default=None, ge=1)


class CampaignRead(CampaignBase):
    id: int
    user_id: int
    created_at: Optional[datetime] = None


# ===== 상품 =====

class ProductCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    category: str = Field(min_length=1, max_length=100)
    original_price: float = Field(ge=0)
    image_url: Optional[str] = None
    description: Optional[str] = None


class ProductUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    original_price: Optional[float] = Field(default=None, ge=0)
    image_url: Optional[str] = None
    description: Optional[str] = None


class ProductRead(ProductCreate):
    id: int


# ===== 캠페인-상품 =====

class CampaignProductCreate(CamelModel):
    product_id: int
    quantity: int = Field(default=1, ge=1)
    discount_percent: float = Field(default=0, ge=0, le=100)
    new_price: float = Field(ge=0)
    position_x: Optional[float] = 0
    position_y: Optional[float] = 0
    scale_x: Optional[float] = 1
    scale_y: Optional[float] = 1
    rotation: Optional[float] = 0
    page_number: Optional[int] = Field(default=1, ge=1)


class CampaignProductUpdate(CamelModel):
    quantity: Optional[int] = Field(default=None, ge=1)
    discount_percent: Optional[float] = Field(default=None, ge=0, le=100)
    new_price: Optional[float] = Field(default=None, ge=0)
    position_x: Optional[float] = None
    position_y: Optional[float] = None
    scale_x: Optional[float] = None
    scale_y: Optional[float] = None
    rotation: Optional[float] = None
    page_number: Optional[int] = Field(default=None, ge=1)


class PositionUpdateRequest(CamelModel):
    x: float
    y: float


class CampaignProductRead(CamelModel):
    id: int
    campaign_id: int
    product_id: int
    quantity: int
    discount_percent: float
    new_price: float
    position_x: Optional[float] = None
    position_y: Optional[float] = None
    scale_x: Optional[float] = None
    scale_y: Optional[float] = None
    rotation: Optional[float] = None
    page_number: Optional[int] = None


class CampaignProductWithProduct(CampaignProductRead):
    product: Optional[ProductRead] = None


# ===== 템플릿 / 로고 =====

class TemplateCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    file_path: str = Field(min_length=1)
    thumbnail_path: Optional[str] = None
    user_id: int


class TemplateRead(TemplateCreate):
    id: int
    created_at: Optional[datetime] = None


class LogoCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    file_path: str = Field(min_length=1)
    is_active: bool = False
    user_id: int


class LogoRead(LogoCreate):
    id: int
    created_at: Optional[datetime] = None


# ===== 통계 =====

class StatisticsRead(CamelModel):
    total_campaigns: int
    active_campaigns: int
    total_templates: int


class MessageResponse(CamelModel):
    message: str
