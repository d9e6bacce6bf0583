# tests/client/test_preview.py

import math

import pytest

from app.client.preview import build_preview, can_submit_movement, preview_stock
from app.domains.inv.models import MovementType


@pytest.mark.parametrize(
    "movement_type, quantity, expected",
    [
        ("IN", 50, 150),
        ("OUT", 30, 70),
        ("ADJUSTMENT", 50, 50),
        ("ADJUSTMENT", 0, 0),
        ("OUT", 130, 0),
    ],
)
def test_preview_stock(movement_type, quantity, expected):
    assert preview_stock(100, movement_type, quantity) == expected


def test_preview_without_quantity_keeps_current_stock():
    assert preview_stock(100, MovementType.IN, None) == 100
    assert preview_stock(100, MovementType.OUT, math.nan) == 100


def test_can_submit_movement():
    """수량 0은 ADJUSTMENT에서만 허용"""
    assert can_submit_movement("ADJUSTMENT", 0) is True
    assert can_submit_movement("IN", 0) is False
    assert can_submit_movement("OUT", 0) is False
    assert can_submit_movement("out", 1) is True
    assert can_submit_movement(MovementType.IN, None) is False
    assert can_submit_movement(MovementType.ADJUSTMENT, -1) is False


def test_build_preview_marks_clamped_out():
    preview = build_preview(100, MovementType.OUT, 130)

    assert preview.projected_stock == 0
    assert preview.delta == -100
    assert preview.would_clamp is True
    assert preview.can_submit is True


def test_build_preview_adjustment():
    preview = build_preview(20, "ADJUSTMENT", 35)

    assert preview.projected_stock == 35
    assert preview.delta == 15
    assert preview.would_clamp is False


def test_unknown_movement_type():
    with pytest.raises(ValueError):
        preview_stock(10, "TRANSFER", 1)
