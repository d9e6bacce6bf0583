# app/domains/inv/alerts.py

"""
품목의 재고 상태에 맞춰 재고 부족/소진 알림을 동기화하는 모듈입니다.

CRUD 계층과 ARQ 태스크가 함께 사용하므로 모델에만 의존합니다.
함수들은 세션에 변경 사항을 추가만 하고 커밋은 호출자가 수행합니다.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from . import models as inv_models

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AlertState:
    alert_type: inv_models.AlertType
    severity: inv_models.AlertSeverity
    title: str
    message: str


def evaluate(item: inv_models.Item) -> Optional[AlertState]:
    """
    알림이 필요한 상태면 AlertState를, 아니면 None을 반환합니다.
    추적 중인 활성 품목의 재고가 최소 기준 이하일 때 알림 대상입니다.
    """
    if not item.is_active or not item.track_stock:
        return None
    if item.current_stock > item.minimum_threshold:
        return None

    message = (
        f"Item '{item.name}' is below minimum threshold. "
        f"Current stock: {item.current_stock}, Threshold: {item.minimum_threshold}"
    )
    if item.current_stock == 0:
        return AlertState(
            inv_models.AlertType.OUT_OF_STOCK,
            inv_models.AlertSeverity.CRITICAL,
            f"Out of Stock: {item.name}",
            message,
        )
    return AlertState(
        inv_models.AlertType.LOW_STOCK,
        inv_models.AlertSeverity.WARNING,
        f"Low Stock: {item.name}",
        message,
    )


async def get_unread_for_item(db: AsyncSession, item_id: uuid.UUID) -> Optional[inv_models.Alert]:
    query = (
        select(inv_models.Alert)
        .where(inv_models.Alert.item_id == item_id, inv_models.Alert.is_read == False)  # noqa: E712
        .order_by(inv_models.Alert.created_at.desc())
    )
    result = await db.execute(query)
    return result.scalars().first()


async def delete_for_item(db: AsyncSession, item_id: uuid.UUID) -> int:
    result = await db.execute(delete(inv_models.Alert).where(inv_models.Alert.item_id == item_id))
    if result.rowcount:
        logger.info("알림 삭제: item=%s count=%s", item_id, result.rowcount)
    return result.rowcount or 0


async def sync_item_alert(db: AsyncSession, item: inv_models.Item) -> Optional[inv_models.Alert]:
    """
    품목의 현재 상태를 알림 테이블에 반영합니다.

    - 알림 대상이 아니면 품목의 알림을 모두 삭제합니다.
    - 읽지 않은 알림이 있으면 내용만 갱신하고, 없으면 새로 생성합니다.
    """
    state = evaluate(item)
    if state is None:
        await delete_for_item(db, item.id)
        return None

    alert = await get_unread_for_item(db, item.id)
    if alert is None:
        alert = inv_models.Alert(organization_id=item.organization_id, item_id=item.id, title=state.title,
                                 message=state.message)
        logger.info("알림 생성: item=%s type=%s", item.id, state.alert_type.value)
    alert.alert_type = state.alert_type
    alert.severity = state.severity
    alert.title = state.title
    alert.message = state.message
    db.add(alert)
    return alert
