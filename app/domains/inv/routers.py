# app/domains/inv/routers.py

"""
'inv' 도메인 (카테고리, 품목, 입출고)과 관련된 API 엔드포인트를 정의하는 모듈입니다.
조회는 인증된 사용자 누구나, 카테고리/품목 변경은 관리자만 가능합니다.
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query, Request, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.core.responses import DataResponse, set_pagination_headers
from app.domains.inv import crud as inv_crud, schemas as inv_schemas
from app.domains.inv import models as inv_models
from app.domains.usr import permissions
from app.domains.usr.models import User as UsrUser

router = APIRouter(
    tags=["Inventory Management (재고 관리)"],
    responses={404: {"description": "Not found"}},
)


def _item_out(db_item: inv_models.Item, current_user: UsrUser) -> inv_schemas.ItemResponse:
    """단가 열람 권한이 없는 사용자에게는 unitCost를 비워서 반환합니다."""
    item_out = inv_schemas.ItemResponse.model_validate(db_item)
    if not permissions.can_view_unit_cost(current_user.role):
        item_out.unit_cost = None
    return item_out


# =============================================================================
# 1. categories 엔드포인트
# =============================================================================
@router.get("/categories", response_model=DataResponse[List[inv_schemas.CategoryResponse]])
async def read_categories(
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    """조직의 카테고리 목록을 이름순으로 조회합니다."""
    categories = await inv_crud.category.get_multi_by_org(db, organization_id=current_user.organization_id)
    return {"data": categories}


@router.post(
    "/categories",
    response_model=DataResponse[inv_schemas.CategoryResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_category(
    category_create: inv_schemas.CategoryCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_admin_user),
):
    """새로운 카테고리를 생성합니다.  관리자 권한이 필요합니다."""
    category = await inv_crud.category.create(
        db, obj_in=category_create, organization_id=current_user.organization_id
    )
    return {"data": category}


@router.put("/categories/{category_id}", response_model=DataResponse[inv_schemas.CategoryResponse])
async def update_category(
    category_id: uuid.UUID,
    category_in: inv_schemas.CategoryUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_admin_user),
):
    """카테고리를 수정합니다.  관리자 권한이 필요합니다."""
    db_category = await inv_crud.category.get_for_org(
        db, id=category_id, organization_id=current_user.organization_id
    )
    category = await inv_crud.category.update(db, db_obj=db_category, obj_in=category_in)
    return {"data": category}


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: uuid.UUID,
    delete_in: Optional[inv_schemas.CategoryDelete] = Body(None),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_admin_user),
):
    """
    카테고리를 삭제합니다.  관리자 권한이 필요합니다.
    품목이 남아 있으면 `targetCategoryId`로 지정한 카테고리로 옮긴 뒤 삭제합니다.
    """
    await inv_crud.category.remove(
        db,
        id=category_id,
        organization_id=current_user.organization_id,
        target_category_id=delete_in.target_category_id if delete_in else None,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# 2. items 엔드포인트
# =============================================================================
@router.get("/items", response_model=DataResponse[inv_schemas.PaginatedItemsResponse])
async def read_items(
    request: Request,
    response: Response,
    search: Optional[str] = Query(None, description="이름 또는 SKU 부분 일치 검색"),
    category_id: Optional[uuid.UUID] = Query(None, alias="categoryId"),
    low_stock: bool = Query(False, alias="lowStock", description="재고 부족/소진 품목만"),
    page: deps.PageParams = Depends(deps.get_page_params),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    """활성 품목 목록을 검색/필터링하여 페이지 단위로 조회합니다."""
    items, total = await inv_crud.item.get_multi_with_filters(
        db,
        organization_id=current_user.organization_id,
        search=search,
        category_id=category_id,
        low_stock=low_stock,
        skip=page.offset,
        limit=page.limit,
    )
    set_pagination_headers(response, request, total=total, limit=page.limit, offset=page.offset)
    return {"data": {"items": [_item_out(i, current_user) for i in items], "total": total}}


@router.post(
    "/items",
    response_model=DataResponse[inv_schemas.ItemResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_item(
    item_create: inv_schemas.ItemCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_admin_user),
):
    """새로운 품목을 생성합니다.  관리자 권한이 필요합니다."""
    db_item = await inv_crud.item.create(db, obj_in=item_create, organization_id=current_user.organization_id)
    return {"data": _item_out(db_item, current_user)}


@router.get("/items/{item_id}", response_model=DataResponse[inv_schemas.ItemResponse])
async def read_item(
    item_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    db_item = await inv_crud.item.get_for_org(db, id=item_id, organization_id=current_user.organization_id)
    return {"data": _item_out(db_item, current_user)}


@router.put("/items/{item_id}", response_model=DataResponse[inv_schemas.ItemResponse])
async def update_item(
    item_id: uuid.UUID,
    item_in: inv_schemas.ItemUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_admin_user),
):
    """품목을 부분 수정합니다.  관리자 권한이 필요합니다."""
    db_item = await inv_crud.item.get_for_org(db, id=item_id, organization_id=current_user.organization_id)
    db_item = await inv_crud.item.update(db, db_obj=db_item, obj_in=item_in)
    return {"data": _item_out(db_item, current_user)}


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_admin_user),
):
    """품목을 비활성화합니다 (soft delete).  관리자 권한이 필요합니다."""
    db_item = await inv_crud.item.get_for_org(
        db, id=item_id, organization_id=current_user.organization_id, active_only=True
    )
    await inv_crud.item.soft_delete(db, db_obj=db_item)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/items/{item_id}/movements", response_model=DataResponse[List[inv_schemas.StockMovementResponse]])
async def read_item_movements(
    item_id: uuid.UUID,
    page: deps.PageParams = Depends(deps.get_page_params),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    """특정 품목의 입출고 이력을 최신순으로 조회합니다."""
    await inv_crud.item.get_for_org(db, id=item_id, organization_id=current_user.organization_id)
    movements = await inv_crud.stock_movement.get_multi_by_org(
        db,
        organization_id=current_user.organization_id,
        item_id=item_id,
        skip=page.offset,
        limit=page.limit,
    )
    return {"data": movements}


# =============================================================================
# 3. stock_movements 엔드포인트
# =============================================================================
@router.get("/movements", response_model=DataResponse[List[inv_schemas.StockMovementResponse]])
async def read_movements(
    item_id: Optional[uuid.UUID] = Query(None, alias="itemId"),
    page: deps.PageParams = Depends(deps.get_page_params),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    movements = await inv_crud.stock_movement.get_multi_by_org(
        db,
        organization_id=current_user.organization_id,
        item_id=item_id,
        skip=page.offset,
        limit=page.limit,
    )
    return {"data": movements}


@router.post(
    "/movements",
    response_model=DataResponse[inv_schemas.StockMovementResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_movement(
    movement_create: inv_schemas.StockMovementCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    """
    입출고를 기록하고 품목 재고를 갱신합니다.
    OUT 수량이 현재 재고보다 크면 400 INSUFFICIENT_STOCK을 반환하며 재고는 바뀌지 않습니다.
    """
    movement = await inv_crud.stock_movement.create(
        db,
        obj_in=movement_create,
        organization_id=current_user.organization_id,
        created_by=current_user.id,
    )
    return {"data": movement}
