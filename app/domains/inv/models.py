# app/domains/inv/models.py

"""
'inv' 도메인 (재고 관리)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

이 모듈은 재고 관리에 필요한 모든 테이블 (categories, items, stock_movements, alerts)에 대한
SQLModel 클래스를 포함합니다. 모든 레코드는 조직(organization_id) 단위로 분리됩니다.
stock_movements는 추가만 가능한 원장으로, 생성 후에는 수정하거나 삭제하지 않습니다.
"""

import uuid
from enum import Enum
from typing import Optional, List
from datetime import datetime, UTC
from decimal import Decimal

from sqlmodel import Field, Relationship, SQLModel, Column
from sqlalchemy import ForeignKey, Numeric, Uuid
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP


class Unit(str, Enum):
    PCS = "pcs"
    KG = "kg"
    GM = "gm"
    LTR = "ltr"


class MovementType(str, Enum):
    IN = "IN"
    OUT = "OUT"
    ADJUSTMENT = "ADJUSTMENT"  # 수량을 절대값(새 재고)으로 해석


class AlertType(str, Enum):
    LOW_STOCK = "LOW_STOCK"
    OUT_OF_STOCK = "OUT_OF_STOCK"


class AlertSeverity(str, Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


# =============================================================================
# 1. categories 테이블 모델
# =============================================================================
class CategoryBase(SQLModel):
    """
    categories 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, description="카테고리 고유 ID")
    organization_id: uuid.UUID = Field(index=True, description="소속 조직 ID")
    name: str = Field(max_length=50, description="카테고리 명칭")
    description: Optional[str] = Field(default=None, description="카테고리 설명")
    color: Optional[str] = Field(default=None, max_length=7, description="표시 색상 (#RRGGBB)")

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=lambda: datetime.now(UTC)),
        description="레코드 마지막 업데이트 일시"
    )


class Category(CategoryBase, table=True):
    __tablename__ = "categories"

    items: List["Item"] = Relationship(back_populates="category", sa_relationship_kwargs={"passive_deletes": True})


# =============================================================================
# 2. items 테이블 모델
# =============================================================================
class ItemBase(SQLModel):
    """
    items 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, description="품목 고유 ID")
    organization_id: uuid.UUID = Field(index=True, description="소속 조직 ID")
    category_id: uuid.UUID = Field(
        sa_column=Column(Uuid, ForeignKey("categories.id", onupdate="CASCADE", ondelete="RESTRICT"), nullable=False, index=True),
        description="카테고리 ID (FK)"
    )
    name: str = Field(max_length=100, description="품목명")
    sku: Optional[str] = Field(default=None, max_length=50, description="재고 관리 코드 (SKU)")
    unit: Unit = Field(default=Unit.PCS, description="단위 (pcs, kg, gm, ltr)")
    minimum_threshold: int = Field(default=0, ge=0, description="최소 재고 기준")
    current_stock: int = Field(default=0, ge=0, description="현재 재고")
    unit_cost: Optional[Decimal] = Field(default=None, ge=0, sa_column=Column(Numeric(18, 2)), description="단가")
    is_active: bool = Field(default=True, description="활성 여부 (False = 삭제됨)")
    track_stock: bool = Field(default=True, description="재고 부족/소진 추적 여부")

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=lambda: datetime.now(UTC)),
        description="레코드 마지막 업데이트 일시"
    )


class Item(ItemBase, table=True):
    __tablename__ = "items"

    category: Optional["Category"] = Relationship(back_populates="items")
    movements: List["StockMovement"] = Relationship(back_populates="item", sa_relationship_kwargs={"passive_deletes": True})


# =============================================================================
# 3. stock_movements 테이블 모델
# =============================================================================
class StockMovementBase(SQLModel):
    """
    stock_movements 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, description="입출고 이력 고유 ID")
    item_id: uuid.UUID = Field(
        sa_column=Column(Uuid, ForeignKey("items.id", ondelete="CASCADE"), nullable=False, index=True),
        description="품목 ID (FK)"
    )
    movement_type: MovementType = Field(description="입출고 유형 (IN, OUT, ADJUSTMENT)")
    quantity: int = Field(ge=0, description="수량 (ADJUSTMENT는 새 재고 값)")
    previous_stock: int = Field(ge=0, description="변경 전 재고")
    new_stock: int = Field(ge=0, description="변경 후 재고")
    reference: Optional[str] = Field(default=None, max_length=100, description="참조 번호 (발주서 등)")
    notes: Optional[str] = Field(default=None, description="비고")
    created_by: uuid.UUID = Field(
        sa_column=Column(Uuid, ForeignKey("users.id"), nullable=False),
        description="기록한 사용자 ID (FK)"
    )

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), index=True),
        description="레코드 생성 일시"
    )


class StockMovement(StockMovementBase, table=True):
    __tablename__ = "stock_movements"

    item: Optional["Item"] = Relationship(back_populates="movements")


# =============================================================================
# 4. alerts 테이블 모델
# =============================================================================
class AlertBase(SQLModel):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, description="알림 고유 ID")
    organization_id: uuid.UUID = Field(index=True, description="소속 조직 ID")
    item_id: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=Column(Uuid, ForeignKey("items.id", ondelete="CASCADE"), nullable=True, index=True),
        description="관련 품목 ID (FK)"
    )
    alert_type: AlertType = Field(default=AlertType.LOW_STOCK, description="알림 유형")
    severity: AlertSeverity = Field(default=AlertSeverity.WARNING, description="심각도")
    title: str = Field(max_length=200, description="알림 제목")
    message: str = Field(description="알림 본문")
    is_read: bool = Field(default=False, description="읽음 여부")

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )


class Alert(AlertBase, table=True):
    __tablename__ = "alerts"
