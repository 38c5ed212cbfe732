"""
餐饮订单服务 - 本体操作层
订单创建走 OrderAggregator，状态流转走 FOOD_ORDER_STATE_MACHINE
"""
from decimal import Decimal
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy.orm import Session

from hotelops.database import transaction
from hotelops.domain.state_machine import FOOD_ORDER_STATE_MACHINE
from hotelops.exceptions import ConflictError, NotFoundError
from hotelops.models.ontology import (
    FoodOrder, FoodOrderItem, FoodOrderStatus, MenuItem, Room
)
from hotelops.models.schemas import FoodOrderCreate
from hotelops.services.order_aggregator import OrderAggregator, OrderKind, OrderLine

logger = logging.getLogger(__name__)


class FoodOrderKind(OrderKind):
    """餐饮订单：明细引用菜单项，可选关联房间"""

    name = "FoodOrder"
    catalog_model = MenuItem
    catalog_label = "菜品"

    def resolve_references(self, db: Session, fields: Dict[str, Any]) -> None:
        room_id = fields.get("room_id")
        if room_id is not None:
            if not db.query(Room).filter(Room.id == room_id).first():
                raise NotFoundError("房间不存在")

    def build_parent(self, fields: Dict[str, Any]) -> FoodOrder:
        return FoodOrder(
            user_id=fields["user_id"],
            room_id=fields.get("room_id"),
            notes=fields.get("notes"),
            status=FoodOrderStatus.PENDING,
        )

    def check_catalog_item(self, catalog_item: MenuItem) -> None:
        if not catalog_item.is_available:
            raise ConflictError(f"菜品已下架: {catalog_item.name}")

    def build_line(self, parent: FoodOrder, catalog_item: MenuItem,
                   line: OrderLine, price: Decimal) -> FoodOrderItem:
        return FoodOrderItem(
            order_id=parent.id,
            menu_item_id=catalog_item.id,
            quantity=line.quantity,
            price=price,
            notes=line.notes,
        )


class FoodOrderService:
    """餐饮订单服务"""

    def __init__(self, db: Session):
        self.db = db
        self.aggregator = OrderAggregator(db)
        self.kind = FoodOrderKind()

    def get_order(self, order_id: int) -> Optional[FoodOrder]:
        """获取单个订单"""
        return self.db.query(FoodOrder).filter(FoodOrder.id == order_id).first()

    def list_orders(self, user_id: Optional[int] = None, status: Optional[FoodOrderStatus] = None,
                    limit: int = 50, offset: int = 0) -> List[FoodOrder]:
        """获取订单列表，按创建时间倒序"""
        query = self.db.query(FoodOrder)
        if user_id is not None:
            query = query.filter(FoodOrder.user_id == user_id)
        if status:
            query = query.filter(FoodOrder.status == status)
        return query.order_by(FoodOrder.created_at.desc(), FoodOrder.id.desc()).offset(offset).limit(limit).all()

    def create_order(self, user_id: int, data: FoodOrderCreate) -> FoodOrder:
        """创建餐饮订单"""
        lines = [
            OrderLine(catalog_item_id=i.menu_item_id, quantity=i.quantity, notes=i.notes)
            for i in data.items
        ]
        fields = {"user_id": user_id, "room_id": data.room_id, "notes": data.notes}
        return self.aggregator.create(self.kind, fields, lines)

    def update_status(self, order_id: int, status: FoodOrderStatus) -> FoodOrder:
        """更新订单状态"""
        with transaction(self.db):
            order = self.db.query(FoodOrder).filter(FoodOrder.id == order_id).with_for_update().first()
            if not order:
                raise NotFoundError("订单不存在")
            FOOD_ORDER_STATE_MACHINE.validate_transition(order.status, status)
            previous = order.status
            order.status = FoodOrderStatus(status)

        self.db.refresh(order)
        logger.info(f"FoodOrder {order.id} status {previous.value} → {order.status.value}")
        return order
