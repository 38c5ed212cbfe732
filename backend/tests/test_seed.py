"""
种子数据测试
"""
from hotelops.models.ontology import Room
from hotelops.seed import seed
from hotelops.services.inventory_service import InventoryService


def test_seed_is_idempotent(db_session):
    first = seed(db_session)
    assert first == {"rooms": 16, "menu_items": 6, "suppliers": 2, "inventory_items": 4}

    second = seed(db_session)
    assert second == {"rooms": 0, "menu_items": 0, "suppliers": 0, "inventory_items": 0}
    assert db_session.query(Room).count() == 16


def test_seeded_inventory_reconciles(db_session):
    seed(db_session)
    service = InventoryService(db_session)
    for item in service.list_items():
        assert service.reconcile(item.id)["consistent"]
    assert [i.name for i in service.list_low_stock()] == ["洗发水"]
