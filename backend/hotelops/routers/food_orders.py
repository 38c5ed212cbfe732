"""
餐饮订单路由
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from hotelops.database import get_db
from hotelops.models.ontology import FoodOrder, FoodOrderStatus
from hotelops.models.schemas import FoodOrderCreate, FoodOrderResponse, FoodOrderStatusUpdate
from hotelops.routers.deps import Page, pagination
from hotelops.security.auth import CurrentActor, get_current_actor
from hotelops.services.food_order_service import FoodOrderService

router = APIRouter(prefix="/food-orders", tags=["餐饮订单"])


def _get_visible_order(service: FoodOrderService, order_id: int, actor: CurrentActor) -> FoodOrder:
    order = service.get_order(order_id)
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="订单不存在")
    if not actor.is_privileged and order.user_id != actor.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="权限不足")
    return order


@router.post("", response_model=FoodOrderResponse, status_code=status.HTTP_201_CREATED)
def create_food_order(
    data: FoodOrderCreate,
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(get_current_actor)
):
    """下单"""
    return FoodOrderService(db).create_order(actor.id, data)


@router.get("", response_model=List[FoodOrderResponse])
def list_food_orders(
    user_id: Optional[int] = None,
    status: Optional[FoodOrderStatus] = None,
    page: Page = Depends(pagination),
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(get_current_actor)
):
    """获取订单列表；客人只看到自己的订单"""
    if not actor.is_privileged:
        user_id = actor.id
    return FoodOrderService(db).list_orders(user_id, status, page.limit, page.offset)


@router.get("/{order_id}", response_model=FoodOrderResponse)
def get_food_order(
    order_id: int,
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(get_current_actor)
):
    """获取订单详情"""
    return _get_visible_order(FoodOrderService(db), order_id, actor)


@router.patch("/{order_id}/status", response_model=FoodOrderResponse)
def update_food_order_status(
    order_id: int,
    data: FoodOrderStatusUpdate,
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(get_current_actor)
):
    """更新订单状态；客人只能取消自己的订单"""
    service = FoodOrderService(db)
    _get_visible_order(service, order_id, actor)
    if not actor.is_privileged and data.status != FoodOrderStatus.CANCELLED:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="权限不足")
    return service.update_status(order_id, data.status)
