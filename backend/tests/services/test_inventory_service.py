"""
库存台账服务测试
"""
import threading
import pytest
from decimal import Decimal

from sqlalchemy.orm.exc import StaleDataError

from hotelops.exceptions import ConflictError, NotFoundError, ValidationError
from hotelops.models.ontology import (
    InventoryItem, InventoryTransaction, TransactionSource, TransactionType
)
from hotelops.models.schemas import InventoryItemCreate, InventoryItemUpdate
from hotelops.services.inventory_service import InventoryService

ACTOR = 2


def _create_item(db, name="床单", quantity=100, min_quantity=20, category="布草"):
    data = InventoryItemCreate(name=name, category=category, unit="张",
                               quantity=quantity, min_quantity=min_quantity,
                               price=Decimal("45.00"))
    return InventoryService(db).create_item(data, ACTOR)


class TestCreateItem:

    def test_opening_quantity_is_recorded(self, db_session):
        item = _create_item(db_session, quantity=100)
        txns = InventoryService(db_session).list_transactions(item.id)

        assert len(txns) == 1
        assert txns[0].type == TransactionType.IN
        assert txns[0].quantity == 100
        assert txns[0].source == TransactionSource.ADJUSTMENT

    def test_zero_opening_quantity_has_no_entry(self, db_session):
        item = _create_item(db_session, quantity=0)
        assert InventoryService(db_session).list_transactions(item.id) == []


class TestAdjustQuantity:
    """盘点调整"""

    def test_adjust_down_to_low_stock(self, db_session):
        """测试 100 调整为 15：记 out 85，并进入低库存列表"""
        service = InventoryService(db_session)
        item = _create_item(db_session, quantity=100, min_quantity=20)

        adjusted = service.adjust_quantity(item.id, 15, ACTOR, notes="月度盘点")

        assert adjusted.quantity == 15
        latest = service.list_transactions(item.id)[0]
        assert latest.type == TransactionType.OUT
        assert latest.quantity == 85
        assert latest.source == TransactionSource.ADJUSTMENT
        assert latest.created_by == ACTOR
        assert latest.notes == "月度盘点"

        assert item.id in [i.id for i in service.list_low_stock()]

    def test_ledger_reconciles(self, db_session):
        service = InventoryService(db_session)
        item = _create_item(db_session, quantity=100)
        service.adjust_quantity(item.id, 15, ACTOR)
        service.adjust_quantity(item.id, 40, ACTOR)

        assert service.ledger_balance(item.id) == 40
        result = service.reconcile(item.id)
        assert result == {"item_id": item.id, "quantity": 40, "ledger_balance": 40, "consistent": True}

    def test_no_change_no_entry(self, db_session):
        service = InventoryService(db_session)
        item = _create_item(db_session, quantity=10)
        service.adjust_quantity(item.id, 10, ACTOR)
        assert len(service.list_transactions(item.id)) == 1

    def test_negative_quantity_rejected(self, db_session):
        service = InventoryService(db_session)
        item = _create_item(db_session, quantity=10)
        with pytest.raises(ValidationError):
            service.adjust_quantity(item.id, -1, ACTOR)
        assert service.get_item(item.id).quantity == 10

    def test_unknown_item(self, db_session):
        with pytest.raises(NotFoundError):
            InventoryService(db_session).adjust_quantity(404, 5, ACTOR)

    def test_reconcile_detects_drift(self, db_session):
        """测试绕过台账直接改数量时对账失败"""
        service = InventoryService(db_session)
        item = _create_item(db_session, quantity=10)
        item.quantity = 12
        db_session.commit()

        assert service.reconcile(item.id)["consistent"] is False


class TestConsumption:

    def test_record_consumption(self, db_session):
        service = InventoryService(db_session)
        item = _create_item(db_session, quantity=30)

        service.record_consumption(item.id, 12, ACTOR)

        assert service.get_item(item.id).quantity == 18
        latest = service.list_transactions(item.id)[0]
        assert latest.source == TransactionSource.CONSUMPTION
        assert latest.type == TransactionType.OUT
        assert service.reconcile(item.id)["consistent"]

    def test_insufficient_stock(self, db_session):
        service = InventoryService(db_session)
        item = _create_item(db_session, quantity=3)
        with pytest.raises(ValidationError):
            service.record_consumption(item.id, 5, ACTOR)
        assert service.get_item(item.id).quantity == 3
        assert len(service.list_transactions(item.id)) == 1


class TestLowStock:

    def test_ordering_by_fill_ratio(self, db_session):
        """测试低库存按 quantity / min_quantity 升序"""
        _create_item(db_session, name="拖鞋", quantity=5, min_quantity=10)     # 0.5
        _create_item(db_session, name="牙刷", quantity=10, min_quantity=100)   # 0.1
        _create_item(db_session, name="梳子", quantity=50, min_quantity=10)    # 充足

        names = [i.name for i in InventoryService(db_session).list_low_stock()]
        assert names == ["牙刷", "拖鞋"]

    def test_zero_threshold_never_low(self, db_session):
        _create_item(db_session, name="衣架", quantity=0, min_quantity=0)
        assert InventoryService(db_session).list_low_stock() == []


class TestItemMaintenance:

    def test_update_item_keeps_quantity(self, db_session):
        service = InventoryService(db_session)
        item = _create_item(db_session, quantity=10)
        updated = service.update_item(item.id, InventoryItemUpdate(min_quantity=50, name="大床单"))

        assert updated.name == "大床单"
        assert updated.min_quantity == 50
        assert updated.quantity == 10

    def test_delete_item_with_ledger_rejected(self, db_session):
        service = InventoryService(db_session)
        item = _create_item(db_session, quantity=10)
        with pytest.raises(ConflictError):
            service.delete_item(item.id)

    def test_delete_unused_item(self, db_session):
        service = InventoryService(db_session)
        item = _create_item(db_session, quantity=0)
        assert service.delete_item(item.id) is True
        assert service.get_item(item.id) is None

    def test_version_increments_on_write(self, db_session):
        service = InventoryService(db_session)
        item = _create_item(db_session, quantity=10)
        before = item.version
        service.adjust_quantity(item.id, 11, ACTOR)
        assert service.get_item(item.id).version == before + 1


class TestRetry:
    """版本冲突重试"""

    def test_retries_then_succeeds(self, db_session):
        service = InventoryService(db_session, max_retries=3)
        calls = []

        def operation(db):
            calls.append(1)
            if len(calls) < 3:
                raise StaleDataError("version mismatch")
            return "done"

        assert service._run_with_retry(operation) == "done"
        assert len(calls) == 3

    def test_gives_up_with_conflict(self, db_session):
        service = InventoryService(db_session, max_retries=2)
        calls = []

        def operation(db):
            calls.append(1)
            raise StaleDataError("version mismatch")

        with pytest.raises(ConflictError):
            service._run_with_retry(operation)
        assert len(calls) == 3

    def test_stale_write_from_second_session(self, db_engine, db_session):
        """测试另一个会话先写入后，旧版本对象提交失败"""
        from sqlalchemy.orm import sessionmaker

        item = _create_item(db_session, quantity=10)
        Session = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
        other = Session()
        stale = other.query(InventoryItem).filter(InventoryItem.id == item.id).first()

        InventoryService(db_session).adjust_quantity(item.id, 20, ACTOR)

        stale.quantity = 99
        with pytest.raises(StaleDataError):
            other.commit()
        other.rollback()
        other.close()

        assert db_session.query(InventoryTransaction).filter(
            InventoryTransaction.inventory_item_id == item.id
        ).count() == 2


class TestConcurrentLedger:
    """多线程并发写同一库存项"""

    def test_concurrent_consumption_loses_no_update(self, file_session_factory):
        """测试 8 个线程各领用 1 件，最终数量为 92 且流水平衡"""
        setup = file_session_factory()
        item_id = _create_item(setup, quantity=100).id
        setup.close()

        workers = 8
        results = []
        barrier = threading.Barrier(workers)

        def worker():
            session = file_session_factory()
            try:
                barrier.wait()
                InventoryService(session, max_retries=50).record_consumption(item_id, 1, ACTOR)
                results.append("ok")
            except ConflictError:
                results.append("conflict")
            finally:
                session.close()

        threads = [threading.Thread(target=worker) for _ in range(workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        check = file_session_factory()
        service = InventoryService(check)
        assert results == ["ok"] * workers
        assert service.get_item(item_id).quantity == 100 - workers
        assert service.reconcile(item_id)["consistent"]
        assert len(service.list_transactions(item_id)) == workers + 1
        check.close()
