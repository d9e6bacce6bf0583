# tests/domains/test_dash_n.py

"""
'dash' 도메인 (대시보드 집계, 알림) 관련 API 엔드포인트에 대한 통합 테스트 모듈입니다.
"""

import uuid
from decimal import Decimal
from datetime import datetime, timedelta, UTC

import pytest
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from app.domains.inv import models as inv_models
from app.domains.usr import models as usr_models


# =================================================================================
# 0. 테스트를 위한 Fixture 설정
# =================================================================================
@pytest.fixture
async def stocked_items(item_factory) -> dict:
    """
    Bolt: 충분 (100 x 2.5), Nut: 부족 (5/10), Washer: 소진 (0/10),
    Glue: 추적 안 함, Old: 비활성
    """
    return {
        "bolt": await item_factory("Bolt"),
        "nut": await item_factory("Nut", current_stock=5, unit_cost=Decimal("1.00")),
        "washer": await item_factory("Washer", current_stock=0, unit_cost=Decimal("3.00")),
        "glue": await item_factory("Glue", current_stock=0, unit_cost=None, track_stock=False),
        "old": await item_factory("Old", current_stock=1, is_active=False),
    }


@pytest.fixture
async def empty_category(db_session: AsyncSession, organization_id: uuid.UUID) -> inv_models.Category:
    category = inv_models.Category(organization_id=organization_id, name="Empty Shelf")
    db_session.add(category)
    await db_session.commit()
    await db_session.refresh(category)
    return category


# =================================================================================
# 1. 집계 테스트
# =================================================================================
@pytest.mark.asyncio
async def test_metrics(
    admin_client: AsyncClient,
    stocked_items: dict,
    db_session: AsyncSession,
    test_admin_user: usr_models.User,
):
    """(성공) 활성 품목 수, 재고 가치, 부족/소진 수, 최근 7일 입출고 수"""
    bolt = stocked_items["bolt"]
    await admin_client.post("/api/v1/movements", json={"itemId": str(bolt.id), "movementType": "IN", "quantity": 10})
    await admin_client.post("/api/v1/movements", json={"itemId": str(bolt.id), "movementType": "OUT", "quantity": 10})

    # 집계 기간 밖의 오래된 이력
    db_session.add(inv_models.StockMovement(
        item_id=bolt.id,
        movement_type=inv_models.MovementType.IN,
        quantity=1,
        previous_stock=0,
        new_stock=1,
        created_by=test_admin_user.id,
        created_at=datetime.now(UTC) - timedelta(days=30),
    ))
    await db_session.commit()

    response = await admin_client.get("/api/v1/dashboard/metrics")

    assert response.status_code == 200
    assert response.json()["data"] == {
        "totalItems": 4,
        "totalValue": 255.0,
        "lowStockCount": 1,
        "outOfStockCount": 1,
        "recentMovements": 2,
    }


@pytest.mark.asyncio
async def test_metrics_empty_org(authorized_client: AsyncClient):
    response = await authorized_client.get("/api/v1/dashboard/metrics")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["totalItems"] == 0
    assert data["totalValue"] == 0
    assert data["recentMovements"] == 0


@pytest.mark.asyncio
async def test_recent_movements_include_item_summary(admin_client: AsyncClient, stocked_items: dict):
    bolt = stocked_items["bolt"]
    await admin_client.post("/api/v1/movements", json={"itemId": str(bolt.id), "movementType": "IN", "quantity": 3})
    await admin_client.post("/api/v1/movements", json={"itemId": str(bolt.id), "movementType": "OUT", "quantity": 2})

    response = await admin_client.get("/api/v1/dashboard/recent-movements", params={"limit": 1})

    assert response.status_code == 200
    data = response.json()["data"]
    assert len(data) == 1
    assert data[0]["movementType"] == "OUT"
    assert data[0]["item"] == {"id": str(bolt.id), "name": "Bolt", "sku": None, "unit": "pcs"}


@pytest.mark.asyncio
async def test_stock_trends(
    admin_client: AsyncClient,
    stocked_items: dict,
    db_session: AsyncSession,
    test_admin_user: usr_models.User,
):
    """(성공) 날짜별 IN/OUT/ADJUSTMENT 합계, 기간 밖 이력은 제외"""
    bolt = stocked_items["bolt"]
    for movement_type, quantity in (("IN", 10), ("IN", 5), ("OUT", 7), ("ADJUSTMENT", 50)):
        await admin_client.post(
            "/api/v1/movements", json={"itemId": str(bolt.id), "movementType": movement_type, "quantity": quantity}
        )
    db_session.add(inv_models.StockMovement(
        item_id=bolt.id,
        movement_type=inv_models.MovementType.OUT,
        quantity=99,
        previous_stock=100,
        new_stock=1,
        created_by=test_admin_user.id,
        created_at=datetime.now(UTC) - timedelta(days=20),
    ))
    await db_session.commit()

    response = await admin_client.get("/api/v1/dashboard/stock-trends", params={"days": 7})

    assert response.status_code == 200
    data = response.json()["data"]
    assert len(data) == 1
    assert data[0]["in"] == 15
    assert data[0]["out"] == 7
    assert data[0]["adjustments"] == 50

    wide = await admin_client.get("/api/v1/dashboard/stock-trends", params={"days": 30})
    dates = [row["date"] for row in wide.json()["data"]]
    assert len(dates) == 2
    assert dates == sorted(dates, reverse=True)


@pytest.mark.asyncio
async def test_stock_trends_days_out_of_range(admin_client: AsyncClient):
    response = await admin_client.get("/api/v1/dashboard/stock-trends", params={"days": 0})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_category_breakdown(
    admin_client: AsyncClient,
    stocked_items: dict,
    empty_category: inv_models.Category,
    test_category: inv_models.Category,
):
    """(성공) 품목이 없는 카테고리도 포함하며 재고 가치가 큰 순서"""
    response = await admin_client.get("/api/v1/dashboard/category-breakdown")

    assert response.status_code == 200
    data = response.json()["data"]
    assert [row["categoryName"] for row in data] == ["Hardware", "Empty Shelf"]
    assert data[0]["categoryId"] == str(test_category.id)
    assert data[0]["itemCount"] == 4
    assert data[0]["totalValue"] == 255.0
    assert data[0]["color"] == "#3B82F6"
    assert data[1]["itemCount"] == 0
    assert data[1]["totalValue"] == 0


@pytest.mark.asyncio
async def test_low_stock_items(authorized_client: AsyncClient, stocked_items: dict):
    """(성공) 부족분이 큰 순서, 추적하지 않는 품목 제외, 일반 사용자는 단가 숨김"""
    response = await authorized_client.get("/api/v1/dashboard/low-stock")

    assert response.status_code == 200
    data = response.json()["data"]
    assert [i["name"] for i in data] == ["Washer", "Nut"]
    assert all(i["unitCost"] is None for i in data)


# =================================================================================
# 2. 알림 테스트
# =================================================================================
@pytest.mark.asyncio
async def test_refresh_and_read_alerts(admin_client: AsyncClient, stocked_items: dict):
    """(성공) 새로고침으로 알림 생성, 읽음 처리 후 목록에서 제외"""
    assert (await admin_client.get("/api/v1/dashboard/alerts")).json()["data"] == []

    refresh = await admin_client.post("/api/v1/dashboard/alerts/refresh")
    assert refresh.status_code == 200
    assert refresh.json()["data"] == {"status": "completed", "syncedItems": 5}

    alerts = (await admin_client.get("/api/v1/dashboard/alerts")).json()["data"]
    by_item = {a["itemId"]: a for a in alerts}
    assert set(by_item) == {str(stocked_items["nut"].id), str(stocked_items["washer"].id)}
    assert by_item[str(stocked_items["nut"].id)]["alertType"] == "LOW_STOCK"
    assert by_item[str(stocked_items["washer"].id)]["severity"] == "CRITICAL"

    washer_alert_id = by_item[str(stocked_items["washer"].id)]["id"]
    marked = await admin_client.put(f"/api/v1/dashboard/alerts/{washer_alert_id}/read")
    assert marked.status_code == 200
    assert marked.json()["data"]["isRead"] is True

    remaining = (await admin_client.get("/api/v1/dashboard/alerts")).json()["data"]
    assert [a["itemId"] for a in remaining] == [str(stocked_items["nut"].id)]

    # 같은 상태의 읽지 않은 알림이 이미 있으면 새로 만들지 않음
    await admin_client.post("/api/v1/dashboard/alerts/refresh")
    nut_alerts = [
        a for a in (await admin_client.get("/api/v1/dashboard/alerts")).json()["data"]
        if a["itemId"] == str(stocked_items["nut"].id)
    ]
    assert len(nut_alerts) == 1


@pytest.mark.asyncio
async def test_refresh_alerts_requires_admin(authorized_client: AsyncClient):
    """(실패) 일반 사용자의 알림 새로고침은 403"""
    response = await authorized_client.post("/api/v1/dashboard/alerts/refresh")

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"


@pytest.mark.asyncio
async def test_mark_alert_of_other_org(authorized_client: AsyncClient, db_session: AsyncSession):
    alert = inv_models.Alert(organization_id=uuid.uuid4(), title="Low Stock: X", message="...")
    db_session.add(alert)
    await db_session.commit()
    await db_session.refresh(alert)

    response = await authorized_client.put(f"/api/v1/dashboard/alerts/{alert.id}/read")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "ALERT_NOT_FOUND"


@pytest.mark.asyncio
async def test_dashboard_requires_authentication(client: AsyncClient):
    response = await client.get("/api/v1/dashboard/metrics")
    assert response.status_code == 401
