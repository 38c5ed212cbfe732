"""
订单聚合器 - 餐饮订单与采购订单共用的创建流程

1. 校验明细非空、数量合法
2. 校验订单引用的父实体（供应商、房间）
3. 创建 total_price = 0 的订单头
4. 逐行查询目录价格，写入明细并累计
5. 回写订单总价

3-5 在同一事务内执行，任一明细失败时订单头和已写入的明细全部回滚
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from hotelops.database import transaction
from hotelops.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


@dataclass
class OrderLine:
    """一条下单请求明细"""
    catalog_item_id: int
    quantity: int
    notes: Optional[str] = None


class OrderKind(ABC):
    """订单类型：定义订单头、明细和目录的具体模型"""

    name: str = "order"
    catalog_model: Any = None
    catalog_label: str = "商品"

    @abstractmethod
    def resolve_references(self, db: Session, fields: Dict[str, Any]) -> None:
        """校验订单头引用的实体，不存在时抛出 NotFoundError"""

    @abstractmethod
    def build_parent(self, fields: Dict[str, Any]) -> Any:
        """构造处于初始状态的订单头（尚未写库）"""

    @abstractmethod
    def build_line(self, parent: Any, catalog_item: Any, line: OrderLine, price: Decimal) -> Any:
        """构造一条明细（尚未写库）"""

    def check_catalog_item(self, catalog_item: Any) -> None:
        """对目录项的额外校验，默认不做限制"""

    def unit_price(self, catalog_item: Any) -> Decimal:
        return Decimal(catalog_item.price)


class OrderAggregator:
    """订单聚合器"""

    def __init__(self, db: Session):
        self.db = db

    def _validate_lines(self, lines: Sequence[OrderLine]) -> None:
        if not lines:
            raise ValidationError("至少需要一个订单明细")
        for line in lines:
            if line.quantity is None or line.quantity < 1:
                raise ValidationError(f"明细数量必须大于 0 (商品 {line.catalog_item_id})")

    def _resolve_catalog_item(self, kind: OrderKind, item_id: int) -> Any:
        item = self.db.query(kind.catalog_model).filter(kind.catalog_model.id == item_id).first()
        if not item:
            raise NotFoundError(f"{kind.catalog_label} {item_id} 不存在")
        return item

    def create(self, kind: OrderKind, fields: Dict[str, Any], lines: List[OrderLine]) -> Any:
        """创建订单及其明细，返回订单头"""
        self._validate_lines(lines)

        with transaction(self.db):
            kind.resolve_references(self.db, fields)

            parent = kind.build_parent(fields)
            parent.total_price = Decimal("0")
            self.db.add(parent)
            self.db.flush()

            total = Decimal("0")
            for line in lines:
                catalog_item = self._resolve_catalog_item(kind, line.catalog_item_id)
                kind.check_catalog_item(catalog_item)

                price = kind.unit_price(catalog_item) * line.quantity
                self.db.add(kind.build_line(parent, catalog_item, line, price))
                total += price

            parent.total_price = total
            self.db.flush()

        self.db.refresh(parent)
        logger.info(f"{kind.name} {parent.id} created with {len(lines)} line(s), total {total}")
        return parent
