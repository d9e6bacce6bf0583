# app/domains/dash/crud.py

"""
'dash' 도메인의 집계 쿼리를 정의하는 모듈입니다.
모든 집계는 조직 단위이며 활성 품목만 대상으로 합니다.
"""

import logging
import uuid
from datetime import datetime, timedelta, UTC
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List

from sqlalchemy import and_, case, func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.domains.inv import models as inv_models

logger = logging.getLogger(__name__)

Item = inv_models.Item
Category = inv_models.Category
StockMovement = inv_models.StockMovement
MovementType = inv_models.MovementType


def _money(value) -> float:
    """Decimal 금액을 소수 둘째 자리로 반올림하여 JSON 숫자로 바꿉니다."""
    return float(Decimal(str(value or 0)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _item_value():
    return Item.current_stock * func.coalesce(Item.unit_cost, 0)


def _count_when(condition):
    return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)


def _sum_quantity_when(movement_type: MovementType):
    return func.coalesce(
        func.sum(case((StockMovement.movement_type == movement_type, StockMovement.quantity), else_=0)), 0
    )


class DashboardCRUD:
    """대시보드 집계 쿼리 모음."""

    async def get_metrics(self, db: AsyncSession, *, organization_id: uuid.UUID) -> Dict[str, Any]:
        tracked = Item.track_stock == True  # noqa: E712
        query = select(
            func.count(Item.id),
            func.coalesce(func.sum(_item_value()), 0),
            _count_when(and_(tracked, Item.current_stock > 0, Item.current_stock <= Item.minimum_threshold)),
            _count_when(and_(tracked, Item.current_stock == 0)),
        ).where(Item.organization_id == organization_id, Item.is_active == True)  # noqa: E712
        total_items, total_value, low_stock, out_of_stock = (await db.execute(query)).one()

        since = datetime.now(UTC) - timedelta(days=settings.RECENT_MOVEMENT_DAYS)
        movement_query = (
            select(func.count(StockMovement.id))
            .join(Item, Item.id == StockMovement.item_id)
            .where(Item.organization_id == organization_id, StockMovement.created_at >= since)
        )
        recent = (await db.execute(movement_query)).scalar_one()

        return {
            "total_items": total_items,
            "total_value": _money(total_value),
            "low_stock_count": int(low_stock),
            "out_of_stock_count": int(out_of_stock),
            "recent_movements": recent,
        }

    async def get_recent_movements(
        self, db: AsyncSession, *, organization_id: uuid.UUID, limit: int = 10
    ) -> List[Dict[str, Any]]:
        """최근 입출고를 품목 요약과 함께 최신순으로 반환합니다."""
        query = (
            select(StockMovement, Item.name, Item.sku, Item.unit)
            .join(Item, Item.id == StockMovement.item_id)
            .where(Item.organization_id == organization_id)
            .order_by(StockMovement.created_at.desc(), StockMovement.id)
            .limit(limit)
        )
        rows = (await db.execute(query)).all()
        return [
            {
                **movement.model_dump(),
                "item": {"id": movement.item_id, "name": name, "sku": sku, "unit": unit},
            }
            for movement, name, sku, unit in rows
        ]

    async def get_stock_trends(
        self, db: AsyncSession, *, organization_id: uuid.UUID, days: int = 7
    ) -> List[Dict[str, Any]]:
        """최근 N일 동안 날짜별 IN/OUT/ADJUSTMENT 수량 합계를 최신 날짜부터 반환합니다."""
        since = datetime.now(UTC) - timedelta(days=days)
        day = func.date(StockMovement.created_at).label("day")
        query = (
            select(
                day,
                _sum_quantity_when(MovementType.IN),
                _sum_quantity_when(MovementType.OUT),
                _sum_quantity_when(MovementType.ADJUSTMENT),
            )
            .join(Item, Item.id == StockMovement.item_id)
            .where(Item.organization_id == organization_id, StockMovement.created_at >= since)
            .group_by(day)
            .order_by(day.desc())
        )
        rows = (await db.execute(query)).all()
        return [
            {"date": row[0], "in": int(row[1]), "out": int(row[2]), "adjustments": int(row[3])}
            for row in rows
        ]

    async def get_category_breakdown(self, db: AsyncSession, *, organization_id: uuid.UUID) -> List[Dict[str, Any]]:
        """카테고리별 활성 품목 수와 재고 가치를 가치가 큰 순서로 반환합니다."""
        total_value = func.coalesce(func.sum(_item_value()), 0).label("total_value")
        query = (
            select(Category.id, Category.name, Category.color, func.count(Item.id), total_value)
            .outerjoin(Item, and_(Item.category_id == Category.id, Item.is_active == True))  # noqa: E712
            .where(Category.organization_id == organization_id)
            .group_by(Category.id, Category.name, Category.color)
            .order_by(total_value.desc(), Category.name)
        )
        rows = (await db.execute(query)).all()
        return [
            {
                "category_id": category_id,
                "category_name": name,
                "color": color,
                "item_count": item_count,
                "total_value": _money(value),
            }
            for category_id, name, color, item_count, value in rows
        ]

    async def get_low_stock_items(
        self, db: AsyncSession, *, organization_id: uuid.UUID, limit: int = 10
    ) -> List[inv_models.Item]:
        """재고가 최소 기준 이하인 추적 품목을 부족분이 큰 순서로 반환합니다."""
        query = (
            select(Item)
            .where(
                Item.organization_id == organization_id,
                Item.is_active == True,  # noqa: E712
                Item.track_stock == True,  # noqa: E712
                Item.current_stock <= Item.minimum_threshold,
            )
            .order_by((Item.minimum_threshold - Item.current_stock).desc(), Item.name)
            .limit(limit)
        )
        result = await db.execute(query)
        return list(result.scalars().all())


dashboard = DashboardCRUD()
