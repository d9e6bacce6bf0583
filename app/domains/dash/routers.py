# app/domains/dash/routers.py

"""
'dash' 도메인 (대시보드)과 관련된 API 엔드포인트를 정의하는 모듈입니다.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends, Query, Request
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.core.responses import DataResponse
from app.domains.dash import crud as dash_crud, schemas as dash_schemas
from app.domains.inv import crud as inv_crud, schemas as inv_schemas
from app.domains.usr import permissions
from app.domains.usr.models import User as UsrUser

router = APIRouter(
    tags=["Dashboard (대시보드)"],
    responses={401: {"description": "Not authenticated"}},
)


# =============================================================================
# 1. 집계 엔드포인트
# =============================================================================
@router.get("/metrics", response_model=DataResponse[dash_schemas.DashboardMetrics])
async def read_metrics(
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    metrics = await dash_crud.dashboard.get_metrics(db, organization_id=current_user.organization_id)
    return {"data": metrics}


@router.get("/recent-movements", response_model=DataResponse[List[dash_schemas.RecentMovementResponse]])
async def read_recent_movements(
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    movements = await dash_crud.dashboard.get_recent_movements(
        db, organization_id=current_user.organization_id, limit=limit
    )
    return {"data": movements}


@router.get("/stock-trends", response_model=DataResponse[List[dash_schemas.StockTrend]])
async def read_stock_trends(
    days: int = Query(7, ge=1, le=365),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    """최근 N일간 날짜별 입출고 수량 합계 (최신 날짜부터)."""
    trends = await dash_crud.dashboard.get_stock_trends(
        db, organization_id=current_user.organization_id, days=days
    )
    return {"data": trends}


@router.get("/category-breakdown", response_model=DataResponse[List[dash_schemas.CategoryBreakdown]])
async def read_category_breakdown(
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    breakdown = await dash_crud.dashboard.get_category_breakdown(db, organization_id=current_user.organization_id)
    return {"data": breakdown}


@router.get("/low-stock", response_model=DataResponse[List[inv_schemas.ItemResponse]])
async def read_low_stock_items(
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    """재고가 최소 기준 이하인 품목을 부족분이 큰 순서로 조회합니다."""
    items = await dash_crud.dashboard.get_low_stock_items(
        db, organization_id=current_user.organization_id, limit=limit
    )
    items_out = [inv_schemas.ItemResponse.model_validate(i) for i in items]
    if not permissions.can_view_unit_cost(current_user.role):
        for item_out in items_out:
            item_out.unit_cost = None
    return {"data": items_out}


# =============================================================================
# 2. 알림 엔드포인트
# =============================================================================
@router.get("/alerts", response_model=DataResponse[List[inv_schemas.AlertResponse]])
async def read_alerts(
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    """읽지 않은 알림을 최신순으로 조회합니다."""
    alerts = await inv_crud.alert.get_unread(db, organization_id=current_user.organization_id, limit=limit)
    return {"data": alerts}


@router.put("/alerts/{alert_id}/read", response_model=DataResponse[inv_schemas.AlertResponse])
async def mark_alert_as_read(
    alert_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    alert = await inv_crud.alert.mark_as_read(db, id=alert_id, organization_id=current_user.organization_id)
    return {"data": alert}


@router.post("/alerts/refresh", response_model=DataResponse[dash_schemas.AlertRefreshResponse])
async def refresh_alerts(
    request: Request,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_admin_user),
):
    """
    조직의 모든 품목에 대해 알림을 다시 평가합니다.  관리자 권한이 필요합니다.
    ARQ Redis 풀이 없으면 요청 안에서 동기적으로 수행합니다.
    """
    arq_redis_pool = getattr(request.app.state, "redis", None)
    result = await inv_crud.alert.refresh(
        db, organization_id=current_user.organization_id, arq_redis_pool=arq_redis_pool
    )
    return {"data": result}
