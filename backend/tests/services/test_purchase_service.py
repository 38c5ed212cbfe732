"""
采购订单服务测试
"""
import threading
import pytest
from datetime import datetime
from decimal import Decimal

from hotelops.exceptions import ConflictError, NotFoundError, StateError, ValidationError
from hotelops.models.ontology import (
    InventoryTransaction, PurchaseOrder, PurchaseOrderItem, PurchaseOrderStatus, TransactionSource
)
from hotelops.models.schemas import InventoryItemCreate, PurchaseOrderCreate, PurchaseOrderLine, SupplierCreate
from hotelops.services.inventory_service import InventoryService
from hotelops.services.purchase_service import PurchaseService
from hotelops.services.supplier_service import SupplierService

ACTOR = 2


def _order(db, supplier, items, clock=None):
    towel, soap = items
    data = PurchaseOrderCreate(
        supplier_id=supplier.id,
        items=[PurchaseOrderLine(inventory_item_id=towel.id, quantity=5),
               PurchaseOrderLine(inventory_item_id=soap.id, quantity=3)],
        notes="季度补货",
    )
    return PurchaseService(db, clock=clock).create_purchase_order(ACTOR, data)


class TestCreatePurchaseOrder:

    def test_total_uses_inventory_prices(self, db_session, sample_supplier, sample_inventory_items, clock):
        order = _order(db_session, sample_supplier, sample_inventory_items, clock)

        assert order.status == PurchaseOrderStatus.PENDING
        assert order.total_price == Decimal("70.50")
        assert order.order_date == datetime(2025, 1, 1, 12, 0)
        assert len(order.items) == 2

    def test_unknown_supplier(self, db_session, sample_inventory_items):
        towel, _ = sample_inventory_items
        data = PurchaseOrderCreate(supplier_id=404, items=[PurchaseOrderLine(inventory_item_id=towel.id, quantity=1)])
        with pytest.raises(NotFoundError):
            PurchaseService(db_session).create_purchase_order(ACTOR, data)
        assert db_session.query(PurchaseOrder).count() == 0

    def test_inactive_supplier(self, db_session, sample_supplier, sample_inventory_items):
        SupplierService(db_session).deactivate_supplier(sample_supplier.id)
        with pytest.raises(ConflictError):
            _order(db_session, sample_supplier, sample_inventory_items)

    def test_unknown_inventory_item_rolls_back(self, db_session, sample_supplier, sample_inventory_items):
        towel, _ = sample_inventory_items
        data = PurchaseOrderCreate(
            supplier_id=sample_supplier.id,
            items=[PurchaseOrderLine(inventory_item_id=towel.id, quantity=1),
                   PurchaseOrderLine(inventory_item_id=9999, quantity=1)],
        )
        with pytest.raises(NotFoundError):
            PurchaseService(db_session).create_purchase_order(ACTOR, data)
        assert db_session.query(PurchaseOrder).count() == 0
        assert db_session.query(PurchaseOrderItem).count() == 0


class TestReceipt:
    """收货入库"""

    def test_receive_applies_lines_once(self, db_session, sample_supplier, sample_inventory_items, clock):
        """测试收货后 X +5、Y +3，各有一条采购来源流水；重复收货被拒绝"""
        towel, soap = sample_inventory_items
        service = PurchaseService(db_session, clock=clock)
        order = _order(db_session, sample_supplier, sample_inventory_items, clock)

        service.approve(order.id, ACTOR)
        received = service.receive(order.id, ACTOR)

        assert received.status == PurchaseOrderStatus.RECEIVED
        assert received.delivery_date == datetime(2025, 1, 1, 12, 0)

        inventory = InventoryService(db_session)
        assert inventory.get_item(towel.id).quantity == 5
        assert inventory.get_item(soap.id).quantity == 3

        entries = db_session.query(InventoryTransaction).filter(
            InventoryTransaction.source == TransactionSource.PURCHASE_ORDER
        ).all()
        assert sorted((e.inventory_item_id, e.quantity) for e in entries) == sorted([(towel.id, 5), (soap.id, 3)])
        assert all(e.source_id == order.id for e in entries)

        with pytest.raises(StateError):
            service.receive(order.id, ACTOR)

        assert inventory.get_item(towel.id).quantity == 5
        assert inventory.get_item(soap.id).quantity == 3
        assert inventory.reconcile(towel.id)["consistent"]

    def test_receive_requires_approval(self, db_session, sample_supplier, sample_inventory_items):
        towel, _ = sample_inventory_items
        service = PurchaseService(db_session)
        order = _order(db_session, sample_supplier, sample_inventory_items)

        with pytest.raises(ConflictError):
            service.receive(order.id, ACTOR)
        assert InventoryService(db_session).get_item(towel.id).quantity == 0
        assert service.get_purchase_order(order.id).status == PurchaseOrderStatus.PENDING

    def test_receipt_failure_rolls_back_status(self, db_session, sample_supplier, sample_inventory_items):
        """测试入库过程中出错时订单状态与库存都不变"""
        towel, soap = sample_inventory_items
        service = PurchaseService(db_session)
        order = _order(db_session, sample_supplier, sample_inventory_items)
        service.approve(order.id, ACTOR)

        # 第二行改为引用不存在的库存项
        db_session.query(PurchaseOrderItem).filter(PurchaseOrderItem.inventory_item_id == soap.id).update(
            {"inventory_item_id": 9999}
        )
        db_session.commit()

        with pytest.raises(NotFoundError):
            service.receive(order.id, ACTOR)

        assert service.get_purchase_order(order.id).status == PurchaseOrderStatus.APPROVED
        assert InventoryService(db_session).get_item(towel.id).quantity == 0


class TestCancelAndStatus:

    def test_cancel_pending(self, db_session, sample_supplier, sample_inventory_items):
        service = PurchaseService(db_session)
        order = _order(db_session, sample_supplier, sample_inventory_items)
        assert service.cancel(order.id, ACTOR).status == PurchaseOrderStatus.CANCELLED

        with pytest.raises(StateError):
            service.approve(order.id, ACTOR)

    def test_cancel_approved(self, db_session, sample_supplier, sample_inventory_items):
        service = PurchaseService(db_session)
        order = _order(db_session, sample_supplier, sample_inventory_items)
        service.approve(order.id, ACTOR)
        assert service.cancel(order.id, ACTOR).status == PurchaseOrderStatus.CANCELLED

    def test_invalid_status_value(self, db_session, sample_supplier, sample_inventory_items):
        order = _order(db_session, sample_supplier, sample_inventory_items)
        with pytest.raises(ValidationError):
            PurchaseService(db_session).update_status(order.id, "shipped", ACTOR)

    def test_unknown_order(self, db_session):
        with pytest.raises(NotFoundError):
            PurchaseService(db_session).approve(404, ACTOR)

    def test_list_by_status(self, db_session, sample_supplier, sample_inventory_items):
        service = PurchaseService(db_session)
        first = _order(db_session, sample_supplier, sample_inventory_items)
        _order(db_session, sample_supplier, sample_inventory_items)
        service.approve(first.id, ACTOR)

        approved = service.list_purchase_orders(status=PurchaseOrderStatus.APPROVED)
        assert [o.id for o in approved] == [first.id]
        assert len(service.list_purchase_orders(supplier_id=sample_supplier.id)) == 2


class TestConcurrentReceipt:

    def test_concurrent_receipts_apply_once(self, file_session_factory):
        """测试 4 个线程同时收货同一订单：只有一个成功，库存只入账一次"""
        setup = file_session_factory()
        supplier = SupplierService(setup).create_supplier(SupplierCreate(
            name="绿源食品", email="sales@lvyuan.example", phone="021-12345678", address="上海"
        ))
        inventory = InventoryService(setup)
        towel = inventory.create_item(InventoryItemCreate(name="毛巾", category="客房用品", unit="条",
                                                          price=Decimal("12.00")), ACTOR)
        soap = inventory.create_item(InventoryItemCreate(name="香皂", category="客房用品", unit="块",
                                                         price=Decimal("3.50")), ACTOR)
        order = _order(setup, supplier, (towel, soap))
        PurchaseService(setup).approve(order.id, ACTOR)
        order_id, towel_id, soap_id = order.id, towel.id, soap.id
        setup.close()

        results = []
        barrier = threading.Barrier(4)

        def worker():
            session = file_session_factory()
            try:
                barrier.wait()
                PurchaseService(session).receive(order_id, ACTOR)
                results.append("ok")
            except (ConflictError, StateError):
                results.append("rejected")
            finally:
                session.close()

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count("ok") == 1
        assert results.count("rejected") == 3

        check = file_session_factory()
        ledger = InventoryService(check)
        assert ledger.get_item(towel_id).quantity == 5
        assert ledger.get_item(soap_id).quantity == 3
        receipts = check.query(InventoryTransaction).filter(
            InventoryTransaction.source == TransactionSource.PURCHASE_ORDER,
            InventoryTransaction.source_id == order_id
        ).all()
        assert sorted(r.inventory_item_id for r in receipts) == sorted([towel_id, soap_id])
        assert PurchaseService(check).get_purchase_order(order_id).status == PurchaseOrderStatus.RECEIVED
        check.close()
