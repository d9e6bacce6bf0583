# app/client/preview.py

"""
입출고를 제출하기 전에 결과 재고를 미리 계산합니다.

서버(app.domains.inv.stock)와 규칙이 같지만, OUT 수량이 재고보다 크면
거부하는 대신 0으로 잘라서 보여 줍니다. 실제 거부는 서버가 INSUFFICIENT_STOCK으로 처리합니다.
"""

import math
from dataclasses import dataclass
from typing import Optional, Union

from app.domains.inv.models import MovementType

Quantity = Optional[Union[int, float]]


def _movement_type(value: Union[MovementType, str]) -> MovementType:
    return value if isinstance(value, MovementType) else MovementType(str(value).upper())


def _is_unset(quantity: Quantity) -> bool:
    return quantity is None or (isinstance(quantity, float) and math.isnan(quantity))


def can_submit_movement(movement_type: Union[MovementType, str], quantity: Quantity) -> bool:
    """수량 0은 ADJUSTMENT에서만 허용되며, IN/OUT은 0보다 커야 합니다."""
    if _is_unset(quantity):
        return False
    if _movement_type(movement_type) is MovementType.ADJUSTMENT:
        return quantity >= 0
    return quantity > 0


def preview_stock(current_stock: int, movement_type: Union[MovementType, str], quantity: Quantity) -> int:
    """입출고 후 예상 재고. 수량이 비어 있으면 현재 재고를 그대로 반환합니다."""
    if _is_unset(quantity):
        return current_stock
    quantity = int(quantity)
    movement_type = _movement_type(movement_type)
    if movement_type is MovementType.IN:
        return current_stock + quantity
    if movement_type is MovementType.OUT:
        return max(0, current_stock - quantity)
    return quantity


@dataclass(frozen=True)
class MovementPreview:
    current_stock: int
    projected_stock: int
    delta: int
    can_submit: bool
    would_clamp: bool  # OUT 수량이 현재 재고보다 큼


def build_preview(current_stock: int, movement_type: Union[MovementType, str], quantity: Quantity) -> MovementPreview:
    movement_type = _movement_type(movement_type)
    projected = preview_stock(current_stock, movement_type, quantity)
    would_clamp = (
        movement_type is MovementType.OUT
        and not _is_unset(quantity)
        and quantity > current_stock
    )
    return MovementPreview(
        current_stock=current_stock,
        projected_stock=projected,
        delta=projected - current_stock,
        can_submit=can_submit_movement(movement_type, quantity),
        would_clamp=would_clamp,
    )
