# app/domains/dash/schemas.py

"""
'dash' 도메인의 응답 스키마를 정의하는 모듈입니다.
"""

import uuid
import datetime as dt
from typing import Optional

from pydantic import Field

from app.core.responses import APIModel
from app.domains.inv.schemas import StockMovementResponse
from app.domains.inv.models import Unit


class DashboardMetrics(APIModel):
    total_items: int = Field(..., description="활성 품목 수")
    total_value: float = Field(..., description="재고 가치 합계 (재고 x 단가)")
    low_stock_count: int = Field(..., description="재고 부족 품목 수 (0 < 재고 <= 최소 기준)")
    out_of_stock_count: int = Field(..., description="재고 소진 품목 수")
    recent_movements: int = Field(..., description="최근 입출고 건수")


class StockTrend(APIModel):
    date: dt.date
    in_: int = Field(0, alias="in")
    out: int = 0
    adjustments: int = 0


class CategoryBreakdown(APIModel):
    category_id: uuid.UUID
    category_name: str
    item_count: int
    total_value: float
    color: Optional[str] = None


class MovementItemSummary(APIModel):
    id: uuid.UUID
    name: str
    sku: Optional[str] = None
    unit: Unit


class RecentMovementResponse(StockMovementResponse):
    item: Optional[MovementItemSummary] = None


class AlertRefreshResponse(APIModel):
    status: str
    synced_items: Optional[int] = None
