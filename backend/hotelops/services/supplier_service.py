"""
供应商服务
"""
from typing import List, Optional

from sqlalchemy.orm import Session

from hotelops.exceptions import NotFoundError
from hotelops.models.ontology import Supplier
from hotelops.models.schemas import SupplierCreate


class SupplierService:
    """供应商服务"""

    def __init__(self, db: Session):
        self.db = db

    def get_supplier(self, supplier_id: int) -> Optional[Supplier]:
        return self.db.query(Supplier).filter(Supplier.id == supplier_id).first()

    def list_suppliers(self, active_only: bool = False,
                       limit: int = 50, offset: int = 0) -> List[Supplier]:
        query = self.db.query(Supplier)
        if active_only:
            query = query.filter(Supplier.is_active.is_(True))
        return query.order_by(Supplier.name).offset(offset).limit(limit).all()

    def create_supplier(self, data: SupplierCreate) -> Supplier:
        supplier = Supplier(**data.model_dump())
        self.db.add(supplier)
        self.db.commit()
        self.db.refresh(supplier)
        return supplier

    def deactivate_supplier(self, supplier_id: int) -> Supplier:
        """停用供应商，停用后不能再下采购单"""
        supplier = self.get_supplier(supplier_id)
        if not supplier:
            raise NotFoundError("供应商不存在")
        supplier.is_active = False
        self.db.commit()
        self.db.refresh(supplier)
        return supplier
