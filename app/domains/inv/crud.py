# app/domains/inv/crud.py

"""
'inv' 도메인의 CRUD(Create, Read, Update, Delete) 작업을 위한 클래스들을 정의하는 모듈입니다.
SQLModel과 SQLAlchemy를 사용하여 데이터베이스와 상호작용합니다.

모든 조회는 조직(organization_id) 단위로 제한되며, 다른 조직의 레코드는 '없음'으로 취급합니다.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple, Union

from sqlalchemy import func, or_, update
from sqlalchemy.orm.attributes import set_committed_value
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import status

from app.core.crud_base import CRUDBase
from app.core.exceptions import AppError, ErrorCode, conflict, not_found
from app.domains.inv import alerts as inv_alerts
from app.domains.inv import models as inv_models
from app.domains.inv import schemas as inv_schemas
from app.domains.inv import tasks as inv_tasks
from app.domains.inv.stock import compute_new_stock, insufficient_stock, stock_delta

logger = logging.getLogger(__name__)


# =============================================================================
# 1. categories
# =============================================================================
class CategoryCRUD(
    CRUDBase[
        inv_models.Category,
        inv_schemas.CategoryCreate,
        inv_schemas.CategoryUpdate,
    ]
):
    """Category 모델에 특화된 CRUD 작업을 처리합니다."""

    async def get_for_org(
        self, db: AsyncSession, *, id: uuid.UUID, organization_id: uuid.UUID
    ) -> inv_models.Category:
        category = await self.get(db, id)
        if category is None or category.organization_id != organization_id:
            raise not_found(ErrorCode.CATEGORY_NOT_FOUND, "Category not found")
        return category

    async def get_multi_by_org(self, db: AsyncSession, *, organization_id: uuid.UUID) -> List[inv_models.Category]:
        """조직의 모든 카테고리를 이름순으로 조회합니다."""
        query = (
            select(self.model)
            .where(self.model.organization_id == organization_id)
            .order_by(self.model.name)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def create(
        self, db: AsyncSession, *, obj_in: inv_schemas.CategoryCreate, organization_id: uuid.UUID
    ) -> inv_models.Category:
        data = obj_in.model_dump()
        data["organization_id"] = organization_id
        category = await super().create(db, obj_in=data)
        logger.info("카테고리 생성: %s (%s)", category.name, category.id)
        return category

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: inv_models.Category,
        obj_in: Union[inv_schemas.CategoryUpdate, Dict[str, Any]]
    ) -> inv_models.Category:
        """카테고리를 수정합니다. 설명/색상을 생략하면 비워집니다."""
        update_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump()
        return await super().update(db, db_obj=db_obj, obj_in=update_data)

    async def count_items(self, db: AsyncSession, *, category_id: uuid.UUID) -> int:
        """비활성(삭제된) 품목을 포함하여 카테고리에 속한 품목 수를 반환합니다."""
        query = select(func.count()).select_from(inv_models.Item).where(inv_models.Item.category_id == category_id)
        result = await db.execute(query)
        return result.scalar_one()

    async def remove(
        self,
        db: AsyncSession,
        *,
        id: uuid.UUID,
        organization_id: uuid.UUID,
        target_category_id: Optional[uuid.UUID] = None,
    ) -> inv_models.Category:
        """
        카테고리를 삭제합니다.
        품목이 남아 있으면 대상 카테고리로 모두 옮긴 뒤 삭제하며,
        대상이 지정되지 않았다면 409 CATEGORY_HAS_ITEMS를 발생시킵니다.
        """
        category = await self.get_for_org(db, id=id, organization_id=organization_id)
        item_count = await self.count_items(db, category_id=category.id)

        if item_count > 0:
            if target_category_id is None:
                raise conflict(
                    ErrorCode.CATEGORY_HAS_ITEMS,
                    f"Category has {item_count} item(s). Provide targetCategoryId to reassign them",
                )
            if target_category_id == category.id:
                raise AppError(status.HTTP_400_BAD_REQUEST, ErrorCode.INVALID_REQUEST,
                               "Target category must be different")
            target = await self.get_for_org(db, id=target_category_id, organization_id=organization_id)

            result = await db.execute(select(inv_models.Item).where(inv_models.Item.category_id == category.id))
            for db_item in result.scalars().all():
                db_item.category_id = target.id
                db.add(db_item)
            await db.flush()
            logger.info("카테고리 %s의 품목 %s개를 %s로 이동", category.id, item_count, target.id)

        await db.delete(category)
        await db.commit()
        logger.info("카테고리 삭제: %s", category.id)
        return category


# =============================================================================
# 2. items
# =============================================================================
class ItemCRUD(
    CRUDBase[
        inv_models.Item,
        inv_schemas.ItemCreate,
        inv_schemas.ItemUpdate,
    ]
):
    """Item 모델에 특화된 CRUD 작업을 처리합니다."""

    async def get_for_org(
        self,
        db: AsyncSession,
        *,
        id: uuid.UUID,
        organization_id: uuid.UUID,
        active_only: bool = False,
        for_update: bool = False,
    ) -> inv_models.Item:
        if for_update:
            # 입출고 기록 중에는 행 잠금을 잡고 최신 값으로 다시 읽습니다.
            query = (
                select(self.model)
                .where(self.model.id == id)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            item = (await db.execute(query)).scalar_one_or_none()
        else:
            item = await self.get(db, id)
        if item is None or item.organization_id != organization_id or (active_only and not item.is_active):
            raise not_found(ErrorCode.ITEM_NOT_FOUND, "Item not found")
        return item

    def _filtered_query(
        self,
        query,
        *,
        organization_id: uuid.UUID,
        search: Optional[str] = None,
        category_id: Optional[uuid.UUID] = None,
        low_stock: bool = False,
    ):
        query = query.where(self.model.organization_id == organization_id, self.model.is_active == True)  # noqa: E712
        if search and search.strip():
            pattern = f"%{search.strip().lower()}%"
            query = query.where(
                or_(
                    func.lower(self.model.name).like(pattern),
                    func.lower(func.coalesce(self.model.sku, "")).like(pattern),
                )
            )
        if category_id is not None:
            query = query.where(self.model.category_id == category_id)
        if low_stock:
            query = query.where(
                self.model.track_stock == True,  # noqa: E712
                self.model.current_stock <= self.model.minimum_threshold,
            )
        return query

    async def get_multi_with_filters(
        self,
        db: AsyncSession,
        *,
        organization_id: uuid.UUID,
        search: Optional[str] = None,
        category_id: Optional[uuid.UUID] = None,
        low_stock: bool = False,
        skip: int = 0,
        limit: int = 50,
    ) -> Tuple[List[inv_models.Item], int]:
        """
        활성 품목을 검색/필터링하여 (목록, 전체 개수)를 반환합니다.
        검색어는 이름 또는 SKU에 대해 대소문자 구분 없이 부분 일치로 비교합니다.
        """
        filters = dict(organization_id=organization_id, search=search, category_id=category_id, low_stock=low_stock)

        count_query = self._filtered_query(select(func.count()).select_from(self.model), **filters)
        total = (await db.execute(count_query)).scalar_one()

        query = (
            self._filtered_query(select(self.model), **filters)
            .order_by(self.model.name, self.model.id)
            .offset(skip)
            .limit(limit)
        )
        result = await db.execute(query)
        return list(result.scalars().all()), total

    async def create(
        self, db: AsyncSession, *, obj_in: inv_schemas.ItemCreate, organization_id: uuid.UUID
    ) -> inv_models.Item:
        """품목을 생성합니다. 카테고리는 같은 조직에 존재해야 합니다."""
        await category.get_for_org(db, id=obj_in.category_id, organization_id=organization_id)

        db_obj = self.model(**obj_in.model_dump(), organization_id=organization_id, is_active=True)
        db.add(db_obj)
        await db.flush()
        await inv_alerts.sync_item_alert(db, db_obj)
        await db.commit()
        await db.refresh(db_obj)
        logger.info("품목 생성: %s (%s) stock=%s", db_obj.name, db_obj.id, db_obj.current_stock)
        return db_obj

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: inv_models.Item,
        obj_in: Union[inv_schemas.ItemUpdate, Dict[str, Any]]
    ) -> inv_models.Item:
        """
        전달된 필드만 수정합니다.
        카테고리를 바꾸면 같은 조직의 카테고리인지 확인하고, 변경 후 알림 상태를 다시 평가합니다.
        """
        update_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        # null은 '변경 없음'으로 취급 (단가는 null로 비울 수 있음)
        update_data = {k: v for k, v in update_data.items() if v is not None or k in ("unit_cost", "sku")}

        new_category_id = update_data.get("category_id")
        if new_category_id is not None and new_category_id != db_obj.category_id:
            await category.get_for_org(db, id=new_category_id, organization_id=db_obj.organization_id)

        for key, value in update_data.items():
            setattr(db_obj, key, value)
        db.add(db_obj)
        await inv_alerts.sync_item_alert(db, db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def soft_delete(self, db: AsyncSession, *, db_obj: inv_models.Item) -> inv_models.Item:
        """품목을 비활성화하고 관련 알림을 삭제합니다. 입출고 이력은 유지됩니다."""
        db_obj.is_active = False
        db.add(db_obj)
        await inv_alerts.delete_for_item(db, db_obj.id)
        await db.commit()
        await db.refresh(db_obj)
        logger.info("품목 비활성화: %s", db_obj.id)
        return db_obj


# =============================================================================
# 3. stock_movements
# =============================================================================
class StockMovementCRUD(
    CRUDBase[
        inv_models.StockMovement,
        inv_schemas.StockMovementCreate,
        inv_schemas.StockMovementCreate,
    ]
):
    """
    StockMovement 모델에 특화된 CRUD 작업을 처리합니다.
    입출고 이력은 추가만 가능하므로 수정/삭제 메서드는 사용하지 않습니다.
    """

    async def _apply_stock_change(
        self,
        db: AsyncSession,
        *,
        db_item: inv_models.Item,
        obj_in: inv_schemas.StockMovementCreate,
    ) -> Tuple[int, int]:
        """
        품목 재고를 UPDATE 한 번으로 바꾸고 (변경 전, 변경 후) 재고를 반환합니다.
        IN/OUT은 현재 컬럼 값에 증감하며, OUT은 재고가 충분한 행에만 적용됩니다.
        동시에 들어온 출고가 같은 재고를 두 번 차감하지 않습니다.
        """
        # 잠금으로 읽은 재고 기준으로 먼저 검증합니다. 최종 판단은 아래 조건부 UPDATE가 합니다.
        expected_stock = compute_new_stock(db_item.current_stock, obj_in.movement_type, obj_in.quantity)
        Item = inv_models.Item

        statement = update(Item).where(Item.id == db_item.id)
        if obj_in.movement_type is inv_models.MovementType.ADJUSTMENT:
            delta = None
            statement = statement.values(current_stock=expected_stock)
        else:
            delta = stock_delta(obj_in.movement_type, obj_in.quantity)
            statement = statement.values(current_stock=Item.current_stock + delta)
            if delta < 0:
                statement = statement.where(Item.current_stock >= obj_in.quantity)
        statement = statement.returning(Item.current_stock).execution_options(synchronize_session=False)

        new_stock = (await db.execute(statement)).scalar_one_or_none()
        if new_stock is None:
            available = (
                await db.execute(select(Item.current_stock).where(Item.id == db_item.id))
            ).scalar_one()
            raise insufficient_stock(obj_in.quantity, available)

        previous_stock = db_item.current_stock if delta is None else new_stock - delta
        set_committed_value(db_item, "current_stock", new_stock)
        return previous_stock, new_stock

    async def create(
        self,
        db: AsyncSession,
        *,
        obj_in: inv_schemas.StockMovementCreate,
        organization_id: uuid.UUID,
        created_by: uuid.UUID,
    ) -> inv_models.StockMovement:
        """
        입출고를 기록합니다.
        품목 재고 갱신, 이력 추가, 알림 동기화를 하나의 트랜잭션으로 커밋합니다.
        """
        db_item = await item.get_for_org(
            db, id=obj_in.item_id, organization_id=organization_id, active_only=True, for_update=True
        )
        previous_stock, new_stock = await self._apply_stock_change(db, db_item=db_item, obj_in=obj_in)

        movement = self.model(
            **obj_in.model_dump(),
            previous_stock=previous_stock,
            new_stock=new_stock,
            created_by=created_by,
        )
        db.add(movement)
        await inv_alerts.sync_item_alert(db, db_item)

        await db.commit()
        await db.refresh(movement)
        await db.refresh(db_item)
        logger.info(
            "입출고 기록: item=%s type=%s qty=%s stock %s -> %s",
            db_item.id, obj_in.movement_type.value, obj_in.quantity, previous_stock, new_stock,
        )
        return movement

    async def get_multi_by_org(
        self,
        db: AsyncSession,
        *,
        organization_id: uuid.UUID,
        item_id: Optional[uuid.UUID] = None,
        since=None,
        skip: int = 0,
        limit: int = 50,
    ) -> List[inv_models.StockMovement]:
        """조직의 입출고 이력을 최신순으로 조회합니다."""
        query = (
            select(self.model)
            .join(inv_models.Item, inv_models.Item.id == self.model.item_id)
            .where(inv_models.Item.organization_id == organization_id)
        )
        if item_id is not None:
            query = query.where(self.model.item_id == item_id)
        if since is not None:
            query = query.where(self.model.created_at >= since)
        query = query.order_by(self.model.created_at.desc(), self.model.id).offset(skip).limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all())


# =============================================================================
# 4. alerts
# =============================================================================
class AlertCRUD(
    CRUDBase[
        inv_models.Alert,
        inv_schemas.AlertResponse,
        inv_schemas.AlertResponse,
    ]
):
    """Alert 모델에 특화된 CRUD 작업을 처리합니다."""

    async def get_unread(
        self, db: AsyncSession, *, organization_id: uuid.UUID, limit: int = 10
    ) -> List[inv_models.Alert]:
        query = (
            select(self.model)
            .where(self.model.organization_id == organization_id, self.model.is_read == False)  # noqa: E712
            .order_by(self.model.created_at.desc())
            .limit(limit)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def mark_as_read(
        self, db: AsyncSession, *, id: uuid.UUID, organization_id: uuid.UUID
    ) -> inv_models.Alert:
        alert = await self.get(db, id)
        if alert is None or alert.organization_id != organization_id:
            raise not_found(ErrorCode.ALERT_NOT_FOUND, "Alert not found")
        return await self.update(db, db_obj=alert, obj_in={"is_read": True})

    async def refresh(self, db: AsyncSession, *, organization_id: uuid.UUID, arq_redis_pool) -> Dict[str, Any]:
        """
        조직 전체 품목의 알림을 다시 평가합니다.
        ARQ Redis 풀이 있으면 백그라운드 작업으로, 없으면 현재 요청에서 동기적으로 수행합니다.
        """
        if arq_redis_pool:
            job = await arq_redis_pool.enqueue_job("sync_low_stock_alerts_task", str(organization_id))
            logger.info("알림 동기화 작업 등록: org=%s job=%s", organization_id, getattr(job, "job_id", None))
            return {"status": "queued", "synced_items": None}

        logger.info("ARQ Redis pool not available, performing alert sync synchronously.")
        result = await inv_tasks.sync_low_stock_alerts_task({"db": db}, str(organization_id))
        return {"status": "completed", "synced_items": result["synced_items"]}


category = CategoryCRUD(inv_models.Category)
item = ItemCRUD(inv_models.Item)
stock_movement = StockMovementCRUD(inv_models.StockMovement)
alert = AlertCRUD(inv_models.Alert)
