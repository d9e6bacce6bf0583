# app/domains/inv/stock.py

"""
입출고 한 건이 재고에 미치는 영향을 계산하는 모듈입니다.

- IN: 새 재고 = 이전 재고 + 수량 (수량 > 0)
- OUT: 새 재고 = 이전 재고 - 수량 (수량 > 0, 이전 재고보다 크면 INSUFFICIENT_STOCK)
- ADJUSTMENT: 새 재고 = 수량 (수량 >= 0, 증감이 아닌 절대값)

클라이언트 미리보기(app.client.preview)와 달리 OUT을 0으로 잘라내지 않고 거부합니다.
"""

from fastapi import status

from app.core.exceptions import AppError, ErrorCode
from .models import MovementType


def validate_quantity(movement_type: MovementType, quantity: int) -> None:
    if movement_type is MovementType.ADJUSTMENT:
        if quantity < 0:
            raise AppError(status.HTTP_400_BAD_REQUEST, ErrorCode.INVALID_QUANTITY,
                           "Adjustment quantity must be zero or greater")
    elif quantity <= 0:
        raise AppError(status.HTTP_400_BAD_REQUEST, ErrorCode.INVALID_QUANTITY,
                       "Quantity must be greater than 0")


def insufficient_stock(quantity: int, available: int) -> AppError:
    return AppError(
        status.HTTP_400_BAD_REQUEST,
        ErrorCode.INSUFFICIENT_STOCK,
        f"Insufficient stock. Required: {quantity}, Available: {available}",
    )


def stock_delta(movement_type: MovementType, quantity: int) -> int:
    """IN/OUT이 재고에 더하는 값. ADJUSTMENT는 증감이 아니므로 받지 않습니다."""
    if movement_type is MovementType.IN:
        return quantity
    if movement_type is MovementType.OUT:
        return -quantity
    raise ValueError(f"{movement_type} has no stock delta")


def compute_new_stock(previous_stock: int, movement_type: MovementType, quantity: int) -> int:
    validate_quantity(movement_type, quantity)

    if movement_type is MovementType.ADJUSTMENT:
        return quantity
    if movement_type not in (MovementType.IN, MovementType.OUT):
        raise AppError(status.HTTP_400_BAD_REQUEST, ErrorCode.INVALID_REQUEST,
                       f"Invalid movement type: {movement_type}")
    if movement_type is MovementType.OUT and previous_stock < quantity:
        raise insufficient_stock(quantity, previous_stock)
    return previous_stock + stock_delta(movement_type, quantity)
