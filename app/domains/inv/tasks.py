# app/domains/inv/tasks.py

"""
'inv' 도메인의 ARQ 백그라운드 태스크를 정의하는 모듈입니다.

태스크는 ARQ 워커에서 실행될 때 독립적인 세션을 열고,
Redis가 없는 환경에서는 CRUD 계층이 `{"db": db}` 컨텍스트로 직접 호출합니다.
"""

import logging
import uuid
from typing import Any, Dict, Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.database import get_async_session_context
from app.domains.inv import alerts as inv_alerts
from app.domains.inv import models as inv_models

logger = logging.getLogger(__name__)


async def _sync_alerts(db: AsyncSession, organization_id: Optional[uuid.UUID]) -> int:
    query = select(inv_models.Item)
    if organization_id is not None:
        query = query.where(inv_models.Item.organization_id == organization_id)
    result = await db.execute(query)
    items = list(result.scalars().all())

    for db_item in items:
        await inv_alerts.sync_item_alert(db, db_item)
    await db.commit()
    return len(items)


async def sync_low_stock_alerts_task(
    ctx: Dict[str, Any], organization_id: Optional[str] = None
) -> Dict[str, Any]:
    """
    품목들의 재고 상태를 다시 평가하여 알림 테이블을 맞춥니다.
    organization_id를 생략하면 모든 조직을 대상으로 합니다 (주기 작업).
    """
    org_id = uuid.UUID(str(organization_id)) if organization_id else None
    logger.info("알림 동기화 작업 시작: org=%s", org_id or "ALL")

    db: Optional[AsyncSession] = ctx.get("db") if ctx else None
    if db is not None:
        synced = await _sync_alerts(db, org_id)
    else:
        async with get_async_session_context() as session:
            synced = await _sync_alerts(session, org_id)

    logger.info("알림 동기화 작업 완료: %s개 품목 확인", synced)
    return {"status": "success", "synced_items": synced}
