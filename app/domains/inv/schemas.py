# app/domains/inv/schemas.py

"""
'inv' 도메인 (재고 관리)의 Pydantic 스키마를 정의하는 모듈입니다.
JSON 키는 camelCase(`categoryId`, `currentStock` ...)로 주고받습니다.
"""

import uuid
from typing import Optional, List
from datetime import datetime
from decimal import Decimal

from pydantic import Field, field_serializer, field_validator

from app.core.responses import APIModel
from .models import Unit
from . import models as inv_models


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


# =============================================================================
# 1. categories 스키마
# =============================================================================
CATEGORY_NAME_MAX_LENGTH = 50
CATEGORY_DESCRIPTION_MAX_LENGTH = 200


class CategoryBase(APIModel):
    name: str = Field(..., description="카테고리 명칭 (앞뒤 공백 제거, 필수, 50자 이하)")
    description: Optional[str] = Field(None, description="카테고리 설명 (빈 문자열은 null, 200자 이하)")
    color: Optional[str] = Field(None, description="표시 색상 #RRGGBB (빈 문자열은 null)")

    @field_validator("name")
    @classmethod
    def name_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Category name is required")
        if len(value) > CATEGORY_NAME_MAX_LENGTH:
            raise ValueError(f"Category name must be less than {CATEGORY_NAME_MAX_LENGTH} characters")
        return value

    @field_validator("description", "color")
    @classmethod
    def blank_is_null(cls, value: Optional[str]) -> Optional[str]:
        return _blank_to_none(value)

    @field_validator("color")
    @classmethod
    def color_format(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and (len(value) != 7 or not value.startswith("#")
                                  or any(c not in "0123456789abcdefABCDEF" for c in value[1:])):
            raise ValueError("Color must be a hex value like #3B82F6")
        return value

    @field_validator("description")
    @classmethod
    def description_length(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and len(value) > CATEGORY_DESCRIPTION_MAX_LENGTH:
            raise ValueError(f"Description must be less than {CATEGORY_DESCRIPTION_MAX_LENGTH} characters")
        return value


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(CategoryBase):
    pass


class CategoryDelete(APIModel):
    target_category_id: Optional[uuid.UUID] = Field(None, description="품목을 옮길 대상 카테고리 ID")


class CategoryResponse(CategoryBase):
    id: uuid.UUID = Field(..., description="카테고리 고유 ID")
    organization_id: uuid.UUID
    created_at: Optional[datetime] = Field(None, description="레코드 생성 일시")
    updated_at: Optional[datetime] = Field(None, description="레코드 마지막 업데이트 일시")


# =============================================================================
# 2. items 스키마
# =============================================================================
class ItemCreate(APIModel):
    category_id: uuid.UUID = Field(..., description="카테고리 ID")
    name: str = Field(..., max_length=100, description="품목명")
    sku: Optional[str] = Field(None, max_length=50, description="SKU (빈 문자열은 null)")
    unit: Unit = Field(Unit.PCS, description="단위")
    minimum_threshold: int = Field(0, ge=0, description="최소 재고 기준")
    current_stock: int = Field(0, ge=0, description="초기 재고")
    unit_cost: Optional[Decimal] = Field(None, ge=0, max_digits=18, decimal_places=2, description="단가")
    track_stock: bool = Field(True, description="재고 부족/소진 추적 여부")

    @field_validator("name")
    @classmethod
    def name_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Item name is required")
        return value

    @field_validator("sku")
    @classmethod
    def blank_sku(cls, value: Optional[str]) -> Optional[str]:
        return _blank_to_none(value)


class ItemUpdate(APIModel):
    """부분 수정. 현재 재고는 입출고(movements)로만 변경합니다."""
    category_id: Optional[uuid.UUID] = None
    name: Optional[str] = Field(None, max_length=100)
    sku: Optional[str] = Field(None, max_length=50)
    unit: Optional[Unit] = None
    minimum_threshold: Optional[int] = Field(None, ge=0)
    unit_cost: Optional[Decimal] = Field(None, ge=0, max_digits=18, decimal_places=2)
    is_active: Optional[bool] = None
    track_stock: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if not value:
            raise ValueError("Item name is required")
        return value

    @field_validator("sku")
    @classmethod
    def blank_sku(cls, value: Optional[str]) -> Optional[str]:
        return _blank_to_none(value)


class ItemResponse(APIModel):
    id: uuid.UUID
    organization_id: uuid.UUID
    category_id: uuid.UUID
    name: str
    sku: Optional[str] = None
    unit: Unit
    minimum_threshold: int
    current_stock: int
    unit_cost: Optional[Decimal] = Field(None, description="단가 (관리자에게만 노출)")
    is_active: bool
    track_stock: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_serializer("unit_cost")
    def serialize_unit_cost(self, value: Optional[Decimal]) -> Optional[float]:
        # JSON에서는 숫자로 내보냅니다.
        return float(value) if value is not None else None


class PaginatedItemsResponse(APIModel):
    items: List[ItemResponse]
    total: int


# =============================================================================
# 3. stock_movements 스키마
# =============================================================================
class StockMovementCreate(APIModel):
    item_id: uuid.UUID = Field(..., description="품목 ID")
    movement_type: inv_models.MovementType = Field(..., description="IN, OUT, ADJUSTMENT")
    quantity: int = Field(..., ge=0, description="수량 (ADJUSTMENT는 새 재고 값)")
    reference: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = Field(None, max_length=500)

    @field_validator("reference", "notes")
    @classmethod
    def blank_is_null(cls, value: Optional[str]) -> Optional[str]:
        return _blank_to_none(value)


class StockMovementResponse(APIModel):
    id: uuid.UUID
    item_id: uuid.UUID
    movement_type: inv_models.MovementType
    quantity: int
    previous_stock: int
    new_stock: int
    reference: Optional[str] = None
    notes: Optional[str] = None
    created_by: uuid.UUID
    created_at: Optional[datetime] = None


# =============================================================================
# 4. alerts 스키마
# =============================================================================
class AlertResponse(APIModel):
    id: uuid.UUID
    organization_id: uuid.UUID
    item_id: Optional[uuid.UUID] = None
    alert_type: inv_models.AlertType
    severity: inv_models.AlertSeverity
    title: str
    message: str
    is_read: bool
    created_at: Optional[datetime] = None
