# tests/client/test_validation.py

import uuid

from app.client.validation import (
    CategoryForm,
    ItemAddForm,
    ItemEditForm,
    StockMovementForm,
    validate_form,
)
from app.domains.inv.models import MovementType
from app.domains.inv.models import Unit


# =================================================================================
# 1. 품목 폼
# =================================================================================
def test_item_add_form_valid():
    form, errors = validate_form(ItemAddForm, {
        "name": " Bolt ",
        "sku": "",
        "categoryId": str(uuid.uuid4()),
        "unit": "kg",
        "minimumThreshold": 5,
        "currentStock": 10,
        "unitCost": 1.25,
    })

    assert errors == {}
    assert form.name == "Bolt"
    assert form.sku is None
    assert form.unit is Unit.KG
    assert form.current_stock == 10


def test_item_form_errors_use_api_field_names():
    form, errors = validate_form(ItemAddForm, {
        "name": "   ",
        "categoryId": "not-a-uuid",
        "minimumThreshold": -1,
        "currentStock": -5,
    })

    assert form is None
    assert errors["name"] == "Item name is required"
    assert "categoryId" in errors
    assert "minimumThreshold" in errors
    assert "currentStock" in errors


def test_item_edit_form_length_limits():
    _, errors = validate_form(ItemEditForm, {
        "name": "x" * 101,
        "sku": "s" * 51,
        "categoryId": str(uuid.uuid4()),
    })

    assert errors["name"] == "Item name must be less than 100 characters"
    assert errors["sku"] == "SKU must be less than 50 characters"


# =================================================================================
# 2. 카테고리 폼
# =================================================================================
def test_category_form():
    form, errors = validate_form(CategoryForm, {"name": "Tools", "color": "#a1B2c3", "description": ""})

    assert errors == {}
    assert form.color == "#a1B2c3"
    assert form.description is None


def test_category_form_invalid_color():
    _, errors = validate_form(CategoryForm, {"name": "Tools", "color": "blue"})
    assert errors == {"color": "Please select a valid color"}


def test_category_form_name_limits():
    _, errors = validate_form(CategoryForm, {"name": ""})
    assert errors == {"name": "Category name is required"}

    _, errors = validate_form(CategoryForm, {"name": "n" * 51})
    assert errors == {"name": "Category name must be less than 50 characters"}


# =================================================================================
# 3. 입출고 폼
# =================================================================================
def test_movement_form_quantity_rules():
    """IN/OUT은 0보다 커야 하고 ADJUSTMENT는 0을 허용"""
    _, errors = validate_form(StockMovementForm, {"movementType": "IN", "quantity": 0})
    assert errors == {"quantity": "Quantity must be greater than 0"}

    form, errors = validate_form(StockMovementForm, {"movementType": "ADJUSTMENT", "quantity": 0})
    assert errors == {}
    assert form.movement_type is MovementType.ADJUSTMENT

    _, errors = validate_form(StockMovementForm, {"movementType": "ADJUSTMENT", "quantity": -2})
    assert errors == {"quantity": "Quantity cannot be negative"}


def test_movement_form_text_limits():
    _, errors = validate_form(StockMovementForm, {
        "movementType": "OUT",
        "quantity": 1,
        "reference": "r" * 101,
        "notes": "n" * 501,
    })

    assert errors == {
        "reference": "Reference must be less than 100 characters",
        "notes": "Notes must be less than 500 characters",
    }
