# app/client/validation.py

"""
품목/카테고리/입출고 입력 폼을 서버로 보내기 전에 검증하는 Pydantic 스키마입니다.

`validate_form(schema, data)`는 `(모델, {})` 또는 `(None, {필드: 메시지})`를 반환합니다.
필드 이름은 API와 같은 camelCase를 사용합니다.
"""

import uuid
from typing import Any, Dict, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import Field, ValidationError, ValidationInfo, field_validator

from app.core.responses import APIModel
from app.domains.inv.models import MovementType, Unit
from app.domains.inv.schemas import CATEGORY_DESCRIPTION_MAX_LENGTH, CATEGORY_NAME_MAX_LENGTH

FormT = TypeVar("FormT", bound=APIModel)


def _required_text(value: str, label: str, max_length: int) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError(f"{label} is required")
    if len(value) > max_length:
        raise ValueError(f"{label} must be less than {max_length} characters")
    return value


def _optional_text(value: Optional[str], label: str, max_length: int) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if len(value) > max_length:
        raise ValueError(f"{label} must be less than {max_length} characters")
    return value or None


# =============================================================================
# 1. 품목 폼
# =============================================================================
class ItemEditForm(APIModel):
    name: str
    sku: Optional[str] = None
    category_id: uuid.UUID
    unit: Unit = Unit.PCS
    minimum_threshold: int = Field(0, ge=0)
    unit_cost: Optional[float] = Field(None, ge=0)
    track_stock: bool = True
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def check_name(cls, value: str) -> str:
        return _required_text(value, "Item name", 100)

    @field_validator("sku")
    @classmethod
    def check_sku(cls, value: Optional[str]) -> Optional[str]:
        return _optional_text(value, "SKU", 50)


class ItemAddForm(ItemEditForm):
    current_stock: int = Field(0, ge=0)


# =============================================================================
# 2. 카테고리 폼
# =============================================================================
class CategoryForm(APIModel):
    name: str
    color: Optional[str] = Field(None, description="#RRGGBB")
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, value: str) -> str:
        return _required_text(value, "Category name", CATEGORY_NAME_MAX_LENGTH)

    @field_validator("color")
    @classmethod
    def check_color(cls, value: Optional[str]) -> Optional[str]:
        value = _optional_text(value, "Color", 7)
        if value is not None and not (
            value.startswith("#") and len(value) == 7
            and all(c in "0123456789abcdefABCDEF" for c in value[1:])
        ):
            raise ValueError("Please select a valid color")
        return value

    @field_validator("description")
    @classmethod
    def check_description(cls, value: Optional[str]) -> Optional[str]:
        return _optional_text(value, "Description", CATEGORY_DESCRIPTION_MAX_LENGTH)


# =============================================================================
# 3. 입출고 폼
# =============================================================================
class StockMovementForm(APIModel):
    movement_type: MovementType
    quantity: int
    reference: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("quantity")
    @classmethod
    def check_quantity(cls, value: int, info: ValidationInfo) -> int:
        movement_type = info.data.get("movement_type")
        if movement_type is MovementType.ADJUSTMENT:
            if value < 0:
                raise ValueError("Quantity cannot be negative")
        elif value <= 0:
            raise ValueError("Quantity must be greater than 0")
        return value

    @field_validator("reference")
    @classmethod
    def check_reference(cls, value: Optional[str]) -> Optional[str]:
        return _optional_text(value, "Reference", 100)

    @field_validator("notes")
    @classmethod
    def check_notes(cls, value: Optional[str]) -> Optional[str]:
        return _optional_text(value, "Notes", 500)


# =============================================================================
# 4. 검증 함수
# =============================================================================
def _clean_message(message: str) -> str:
    prefix = "Value error, "
    return message[len(prefix):] if message.startswith(prefix) else message


def validate_form(schema: Type[FormT], data: Mapping[str, Any]) -> Tuple[Optional[FormT], Dict[str, str]]:
    """폼 데이터를 검증합니다. 필드마다 첫 번째 오류 메시지만 남깁니다."""
    try:
        return schema.model_validate(dict(data)), {}
    except ValidationError as e:
        errors: Dict[str, str] = {}
        for error in e.errors():
            field = ".".join(str(part) for part in error.get("loc", ())) or "form"
            errors.setdefault(field, _clean_message(error.get("msg", "Invalid value")))
        return None, errors
