"""
库存台账服务 - 本体操作层
管理 InventoryItem 与只追加的 InventoryTransaction

不变式：对任一库存项，流水中 in 之和减 out 之和恒等于当前 quantity。
每次“读数量 - 算差值 - 写数量 - 记流水”都在一个事务内完成，
读取时加行锁，写入时由 version 乐观锁兜底；版本冲突按配置次数重试
"""
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar
import logging

from sqlalchemy import Float, case, cast, func
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from hotelops.config import settings
from hotelops.database import run_in_transaction, transaction
from hotelops.exceptions import ConflictError, NotFoundError, ValidationError
from hotelops.models.ontology import (
    InventoryItem, InventoryTransaction, PurchaseOrderItem,
    TransactionSource, TransactionType
)
from hotelops.models.schemas import InventoryItemCreate, InventoryItemUpdate

logger = logging.getLogger(__name__)

T = TypeVar("T")


class InventoryService:
    """库存台账服务"""

    def __init__(self, db: Session, max_retries: Optional[int] = None):
        self.db = db
        self.max_retries = settings.LEDGER_MAX_RETRIES if max_retries is None else max_retries

    # ============== 查询 ==============

    def get_item(self, item_id: int) -> Optional[InventoryItem]:
        return self.db.query(InventoryItem).filter(InventoryItem.id == item_id).first()

    def list_items(self, category: Optional[str] = None,
                   limit: int = 50, offset: int = 0) -> List[InventoryItem]:
        """获取库存列表，按分类和名称排序"""
        query = self.db.query(InventoryItem)
        if category:
            query = query.filter(InventoryItem.category == category)
        return query.order_by(InventoryItem.category, InventoryItem.name).offset(offset).limit(limit).all()

    def list_categories(self) -> List[str]:
        rows = self.db.query(InventoryItem.category).distinct().order_by(InventoryItem.category).all()
        return [r[0] for r in rows]

    def list_low_stock(self, limit: int = 50, offset: int = 0) -> List[InventoryItem]:
        """
        低库存列表：quantity < min_quantity
        按库存比例 quantity / min_quantity 升序，其次按分类、名称
        """
        fill_ratio = cast(InventoryItem.quantity, Float) / cast(InventoryItem.min_quantity, Float)
        return self.db.query(InventoryItem).filter(
            InventoryItem.quantity < InventoryItem.min_quantity
        ).order_by(
            fill_ratio.asc(), InventoryItem.category, InventoryItem.name
        ).offset(offset).limit(limit).all()

    def list_transactions(self, item_id: int, limit: int = 50, offset: int = 0) -> List[InventoryTransaction]:
        """库存流水，最新在前"""
        self._require_item(item_id)
        return self.db.query(InventoryTransaction).filter(
            InventoryTransaction.inventory_item_id == item_id
        ).order_by(
            InventoryTransaction.created_at.desc(), InventoryTransaction.id.desc()
        ).offset(offset).limit(limit).all()

    def ledger_balance(self, item_id: int) -> int:
        """流水累计结存：in 为正，out 为负"""
        signed = case(
            (InventoryTransaction.type == TransactionType.IN, InventoryTransaction.quantity),
            else_=-InventoryTransaction.quantity,
        )
        total = self.db.query(func.coalesce(func.sum(signed), 0)).filter(
            InventoryTransaction.inventory_item_id == item_id
        ).scalar()
        return int(total or 0)

    def reconcile(self, item_id: int) -> Dict[str, Any]:
        """对账：当前数量与流水结存是否一致"""
        item = self._require_item(item_id)
        balance = self.ledger_balance(item_id)
        consistent = balance == item.quantity
        if not consistent:
            logger.warning(
                f"Inventory item {item_id} out of balance: quantity={item.quantity}, ledger={balance}"
            )
        return {
            "item_id": item.id,
            "quantity": item.quantity,
            "ledger_balance": balance,
            "consistent": consistent,
        }

    # ============== 库存项维护 ==============

    def create_item(self, data: InventoryItemCreate, actor_id: int) -> InventoryItem:
        """创建库存项；期初数量记为一条 adjustment 入库流水"""
        with transaction(self.db):
            item = InventoryItem(**data.model_dump())
            self.db.add(item)
            self.db.flush()
            if item.quantity:
                self._append(item, item.quantity, TransactionSource.ADJUSTMENT,
                             actor_id=actor_id, notes="期初库存")

        self.db.refresh(item)
        logger.info(f"Inventory item {item.id} '{item.name}' created with quantity {item.quantity}")
        return item

    def update_item(self, item_id: int, data: InventoryItemUpdate) -> InventoryItem:
        """更新库存项资料；数量只能通过台账操作变更"""
        def _update(db: Session) -> InventoryItem:
            item = self._require_item(item_id, for_update=True)
            for key, value in data.model_dump(exclude_unset=True).items():
                setattr(item, key, value)
            db.flush()
            return item

        item = self._run_with_retry(_update)
        self.db.refresh(item)
        return item

    def delete_item(self, item_id: int) -> bool:
        """删除库存项，已有流水或采购明细引用时拒绝"""
        with transaction(self.db):
            item = self._require_item(item_id, for_update=True)
            has_ledger = self.db.query(InventoryTransaction).filter(
                InventoryTransaction.inventory_item_id == item_id
            ).count()
            has_purchase = self.db.query(PurchaseOrderItem).filter(
                PurchaseOrderItem.inventory_item_id == item_id
            ).count()
            if has_ledger or has_purchase:
                raise ConflictError("库存项已有流水或采购记录，无法删除")
            self.db.delete(item)
        return True

    # ============== 台账操作 ==============

    def adjust_quantity(self, item_id: int, new_quantity: int, actor_id: int,
                        notes: Optional[str] = None) -> InventoryItem:
        """盘点调整：把数量设为 new_quantity，差值记一条 adjustment 流水"""
        if new_quantity is None or new_quantity < 0:
            raise ValidationError("库存数量不能为负数")

        def _adjust(db: Session) -> InventoryItem:
            item = self._require_item(item_id, for_update=True)
            delta = new_quantity - item.quantity
            if delta != 0:
                self._append(item, delta, TransactionSource.ADJUSTMENT,
                             actor_id=actor_id, notes=notes)
                item.quantity = new_quantity
            db.flush()
            return item

        item = self._run_with_retry(_adjust)
        self.db.refresh(item)
        logger.info(f"Inventory item {item.id} adjusted to {item.quantity} by {actor_id}")
        return item

    def record_consumption(self, item_id: int, quantity: int, actor_id: int,
                           notes: Optional[str] = None) -> InventoryItem:
        """领用出库"""
        if quantity is None or quantity < 1:
            raise ValidationError("领用数量必须大于 0")

        def _consume(db: Session) -> InventoryItem:
            item = self._require_item(item_id, for_update=True)
            if item.quantity < quantity:
                raise ValidationError(f"库存不足: {item.name} 当前 {item.quantity}，需要 {quantity}")
            self._append(item, -quantity, TransactionSource.CONSUMPTION,
                         actor_id=actor_id, notes=notes)
            item.quantity -= quantity
            db.flush()
            return item

        item = self._run_with_retry(_consume)
        self.db.refresh(item)
        logger.info(f"Inventory item {item.id} consumed {quantity}, remaining {item.quantity}")
        return item

    def apply_purchase_receipt(self, purchase_order_id: int,
                               lines: Iterable[PurchaseOrderItem], actor_id: int) -> None:
        """
        采购收货入库
        只由采购订单状态机在转入 received 的事务内调用，本方法不提交
        """
        for line in lines:
            item = self._require_item(line.inventory_item_id, for_update=True)
            item.quantity += line.quantity
            self._append(item, line.quantity, TransactionSource.PURCHASE_ORDER,
                         actor_id=actor_id, source_id=purchase_order_id)
            logger.info(
                f"Inventory item {item.id} +{line.quantity} from purchase order {purchase_order_id}"
            )
        self.db.flush()

    # ============== 内部方法 ==============

    def _require_item(self, item_id: int, for_update: bool = False) -> InventoryItem:
        query = self.db.query(InventoryItem).filter(InventoryItem.id == item_id)
        if for_update:
            query = query.with_for_update()
        item = query.first()
        if not item:
            raise NotFoundError(f"库存项 {item_id} 不存在")
        return item

    def _append(self, item: InventoryItem, delta: int, source: TransactionSource,
                actor_id: int, source_id: Optional[int] = None,
                notes: Optional[str] = None) -> InventoryTransaction:
        """追加一条流水，delta 为带符号的变化量"""
        txn = InventoryTransaction(
            inventory_item_id=item.id,
            quantity=abs(delta),
            type=TransactionType.IN if delta > 0 else TransactionType.OUT,
            source=source,
            source_id=source_id,
            notes=notes,
            created_by=actor_id,
        )
        self.db.add(txn)
        return txn

    def _run_with_retry(self, operation: Callable[[Session], T]) -> T:
        """在事务内执行 operation，遇到版本冲突时重试"""
        attempts = self.max_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                return run_in_transaction(self.db, operation)
            except StaleDataError:
                logger.warning(f"Inventory version conflict, attempt {attempt}/{attempts}")
        raise ConflictError("库存记录并发修改冲突，请重试")
