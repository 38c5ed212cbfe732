"""
库存管理路由
数量变更只能经由 adjust / consume / 采购收货，均记入流水
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from hotelops.database import get_db
from hotelops.models.schemas import (
    ConsumptionCreate, InventoryItemCreate, InventoryItemResponse, InventoryItemUpdate,
    InventoryTransactionResponse, QuantityAdjust, ReconcileResponse
)
from hotelops.routers.deps import Page, pagination
from hotelops.security.auth import CurrentActor, require_admin, require_staff_or_admin
from hotelops.services.inventory_service import InventoryService

router = APIRouter(prefix="/inventory", tags=["库存管理"])


@router.get("", response_model=List[InventoryItemResponse])
def list_inventory(
    category: Optional[str] = None,
    page: Page = Depends(pagination),
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(require_staff_or_admin)
):
    """获取库存列表"""
    return InventoryService(db).list_items(category, page.limit, page.offset)


@router.get("/categories", response_model=List[str])
def list_categories(
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(require_staff_or_admin)
):
    """获取库存分类"""
    return InventoryService(db).list_categories()


@router.get("/low-stock", response_model=List[InventoryItemResponse])
def list_low_stock(
    page: Page = Depends(pagination),
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(require_staff_or_admin)
):
    """低库存预警列表"""
    return InventoryService(db).list_low_stock(page.limit, page.offset)


@router.get("/{item_id}", response_model=InventoryItemResponse)
def get_inventory_item(
    item_id: int,
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(require_staff_or_admin)
):
    """获取库存项详情"""
    item = InventoryService(db).get_item(item_id)
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="库存项不存在")
    return item


@router.post("", response_model=InventoryItemResponse, status_code=status.HTTP_201_CREATED)
def create_inventory_item(
    data: InventoryItemCreate,
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(require_admin)
):
    """创建库存项"""
    return InventoryService(db).create_item(data, actor.id)


@router.put("/{item_id}", response_model=InventoryItemResponse)
def update_inventory_item(
    item_id: int,
    data: InventoryItemUpdate,
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(require_admin)
):
    """更新库存项资料"""
    return InventoryService(db).update_item(item_id, data)


@router.delete("/{item_id}")
def delete_inventory_item(
    item_id: int,
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(require_admin)
):
    """删除库存项"""
    InventoryService(db).delete_item(item_id)
    return {"message": "删除成功"}


@router.post("/{item_id}/adjust", response_model=InventoryItemResponse)
def adjust_inventory(
    item_id: int,
    data: QuantityAdjust,
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(require_staff_or_admin)
):
    """盘点调整"""
    return InventoryService(db).adjust_quantity(item_id, data.quantity, actor.id, data.notes)


@router.post("/{item_id}/consume", response_model=InventoryItemResponse)
def consume_inventory(
    item_id: int,
    data: ConsumptionCreate,
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(require_staff_or_admin)
):
    """领用出库"""
    return InventoryService(db).record_consumption(item_id, data.quantity, actor.id, data.notes)


@router.get("/{item_id}/transactions", response_model=List[InventoryTransactionResponse])
def list_transactions(
    item_id: int,
    page: Page = Depends(pagination),
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(require_staff_or_admin)
):
    """库存流水"""
    return InventoryService(db).list_transactions(item_id, page.limit, page.offset)


@router.get("/{item_id}/reconcile", response_model=ReconcileResponse)
def reconcile_inventory(
    item_id: int,
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(require_staff_or_admin)
):
    """库存对账"""
    return InventoryService(db).reconcile(item_id)
