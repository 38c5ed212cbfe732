"""
采购订单服务 - 本体操作层

创建：OrderAggregator（明细单价取库存项 price）
状态流转：pending → approved → received / cancelled
转入 received 时在同一事务内完成：逐行入库 + 记流水、写入收货时间、更新状态。
订单行带版本号并加行锁，状态检查在事务内进行，
因此同一订单的第二次收货一定看到 received 并被拒绝
"""
from decimal import Decimal
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from hotelops.clock import Clock, utcnow
from hotelops.database import transaction
from hotelops.domain.state_machine import PURCHASE_ORDER_STATE_MACHINE
from hotelops.exceptions import ConflictError, NotFoundError, ValidationError
from hotelops.models.ontology import (
    InventoryItem, PurchaseOrder, PurchaseOrderItem, PurchaseOrderStatus, Supplier
)
from hotelops.models.schemas import PurchaseOrderCreate
from hotelops.services.inventory_service import InventoryService
from hotelops.services.order_aggregator import OrderAggregator, OrderKind, OrderLine

logger = logging.getLogger(__name__)


class PurchaseOrderKind(OrderKind):
    """采购订单：明细引用库存项，必须关联有效供应商"""

    name = "PurchaseOrder"
    catalog_model = InventoryItem
    catalog_label = "库存项"

    def __init__(self, clock: Clock):
        self._now = clock

    def resolve_references(self, db: Session, fields: Dict[str, Any]) -> None:
        supplier = db.query(Supplier).filter(Supplier.id == fields["supplier_id"]).first()
        if not supplier:
            raise NotFoundError("供应商不存在")
        if not supplier.is_active:
            raise ConflictError(f"供应商已停用: {supplier.name}")

    def build_parent(self, fields: Dict[str, Any]) -> PurchaseOrder:
        return PurchaseOrder(
            supplier_id=fields["supplier_id"],
            notes=fields.get("notes"),
            created_by=fields["created_by"],
            order_date=self._now(),
            status=PurchaseOrderStatus.PENDING,
        )

    def build_line(self, parent: PurchaseOrder, catalog_item: InventoryItem,
                   line: OrderLine, price: Decimal) -> PurchaseOrderItem:
        return PurchaseOrderItem(
            purchase_order_id=parent.id,
            inventory_item_id=catalog_item.id,
            quantity=line.quantity,
            price=price,
        )


class PurchaseService:
    """采购订单服务"""

    def __init__(self, db: Session, clock: Clock = None):
        self.db = db
        self._now = clock or utcnow
        self.aggregator = OrderAggregator(db)
        self.kind = PurchaseOrderKind(self._now)
        self.inventory = InventoryService(db)

    def get_purchase_order(self, order_id: int) -> Optional[PurchaseOrder]:
        return self.db.query(PurchaseOrder).filter(PurchaseOrder.id == order_id).first()

    def list_purchase_orders(self, status: Optional[PurchaseOrderStatus] = None,
                             supplier_id: Optional[int] = None,
                             limit: int = 50, offset: int = 0) -> List[PurchaseOrder]:
        """获取采购订单列表，按下单时间倒序"""
        query = self.db.query(PurchaseOrder)
        if status:
            query = query.filter(PurchaseOrder.status == status)
        if supplier_id is not None:
            query = query.filter(PurchaseOrder.supplier_id == supplier_id)
        return query.order_by(PurchaseOrder.order_date.desc(), PurchaseOrder.id.desc()).offset(offset).limit(limit).all()

    def create_purchase_order(self, actor_id: int, data: PurchaseOrderCreate) -> PurchaseOrder:
        """创建采购订单"""
        lines = [
            OrderLine(catalog_item_id=i.inventory_item_id, quantity=i.quantity)
            for i in data.items
        ]
        fields = {"supplier_id": data.supplier_id, "notes": data.notes, "created_by": actor_id}
        return self.aggregator.create(self.kind, fields, lines)

    def update_status(self, order_id: int, status: PurchaseOrderStatus, actor_id: int) -> PurchaseOrder:
        """
        采购订单状态流转

        Raises:
            NotFoundError: 订单不存在
            StateError: 订单已处于 received / cancelled
            ConflictError: 非法转换，或并发修改导致版本冲突
        """
        try:
            target = PurchaseOrderStatus(status)
        except ValueError:
            raise ValidationError(f"PurchaseOrder 无效状态: {status}")

        try:
            with transaction(self.db):
                order = self.db.query(PurchaseOrder).filter(
                    PurchaseOrder.id == order_id
                ).with_for_update().first()
                if not order:
                    raise NotFoundError("采购订单不存在")

                PURCHASE_ORDER_STATE_MACHINE.validate_transition(order.status, target)
                previous = order.status

                if target == PurchaseOrderStatus.RECEIVED:
                    self.inventory.apply_purchase_receipt(order.id, order.items, actor_id)
                    order.delivery_date = self._now()

                order.status = target
                self.db.flush()
        except StaleDataError:
            logger.warning(f"PurchaseOrder {order_id} modified concurrently, transition to {target.value} rejected")
            raise ConflictError("采购订单已被并发修改，请刷新后重试")

        self.db.refresh(order)
        logger.info(f"PurchaseOrder {order.id} status {previous.value} → {order.status.value} by {actor_id}")
        return order

    def approve(self, order_id: int, actor_id: int) -> PurchaseOrder:
        return self.update_status(order_id, PurchaseOrderStatus.APPROVED, actor_id)

    def receive(self, order_id: int, actor_id: int) -> PurchaseOrder:
        return self.update_status(order_id, PurchaseOrderStatus.RECEIVED, actor_id)

    def cancel(self, order_id: int, actor_id: int) -> PurchaseOrder:
        return self.update_status(order_id, PurchaseOrderStatus.CANCELLED, actor_id)
