"""
采购订单路由
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from hotelops.database import get_db
from hotelops.models.ontology import ActorRole, PurchaseOrderStatus
from hotelops.models.schemas import PurchaseOrderCreate, PurchaseOrderResponse, PurchaseOrderStatusUpdate
from hotelops.routers.deps import Page, pagination
from hotelops.security.auth import CurrentActor, require_staff_or_admin
from hotelops.services.purchase_service import PurchaseService

router = APIRouter(prefix="/purchase-orders", tags=["采购管理"])


@router.post("", response_model=PurchaseOrderResponse, status_code=status.HTTP_201_CREATED)
def create_purchase_order(
    data: PurchaseOrderCreate,
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(require_staff_or_admin)
):
    """创建采购订单"""
    return PurchaseService(db).create_purchase_order(actor.id, data)


@router.get("", response_model=List[PurchaseOrderResponse])
def list_purchase_orders(
    status: Optional[PurchaseOrderStatus] = None,
    supplier_id: Optional[int] = None,
    page: Page = Depends(pagination),
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(require_staff_or_admin)
):
    """获取采购订单列表"""
    return PurchaseService(db).list_purchase_orders(status, supplier_id, page.limit, page.offset)


@router.get("/{order_id}", response_model=PurchaseOrderResponse)
def get_purchase_order(
    order_id: int,
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(require_staff_or_admin)
):
    """获取采购订单详情"""
    order = PurchaseService(db).get_purchase_order(order_id)
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="采购订单不存在")
    return order


@router.patch("/{order_id}/status", response_model=PurchaseOrderResponse)
def update_purchase_order_status(
    order_id: int,
    data: PurchaseOrderStatusUpdate,
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(require_staff_or_admin)
):
    """采购订单状态流转；审批仅限管理员"""
    if data.status == PurchaseOrderStatus.APPROVED and actor.role != ActorRole.ADMIN:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="权限不足")
    return PurchaseService(db).update_status(order_id, data.status, actor.id)
