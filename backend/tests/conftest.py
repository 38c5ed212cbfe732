"""
Pytest 配置和共享 fixtures
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from datetime import datetime
from decimal import Decimal
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from hotelops.database import Base, get_db
from hotelops.locks import room_locks
from hotelops.models.ontology import (
    ActorRole, InventoryItem, MenuItem, Room, RoomStatus, Supplier
)
from hotelops.security.auth import create_access_token
from hotelops.main import app

ADMIN_ID = 1
STAFF_ID = 2
GUEST_ID = 100
OTHER_GUEST_ID = 101

FIXED_NOW = datetime(2025, 1, 1, 12, 0, 0)


@pytest.fixture(scope="function")
def db_engine():
    """创建内存数据库引擎"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """创建数据库会话"""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    yield session
    session.close()
    room_locks.clear()


@pytest.fixture(scope="function")
def file_session_factory(tmp_path):
    """基于文件的 SQLite，多线程测试中每个线程使用独立连接"""
    engine = create_engine(f"sqlite:///{tmp_path / 'concurrency.db'}",
                           connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()
    room_locks.clear()


@pytest.fixture(scope="function")
def client(db_session):
    """创建测试客户端"""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def clock():
    """固定时钟：2025-01-01 12:00 UTC"""
    return lambda: FIXED_NOW


# ============== 认证相关 Fixtures ==============

@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {create_access_token(ADMIN_ID, ActorRole.ADMIN)}"}


@pytest.fixture
def staff_headers():
    return {"Authorization": f"Bearer {create_access_token(STAFF_ID, ActorRole.STAFF)}"}


@pytest.fixture
def guest_headers():
    return {"Authorization": f"Bearer {create_access_token(GUEST_ID, ActorRole.GUEST)}"}


@pytest.fixture
def other_guest_headers():
    return {"Authorization": f"Bearer {create_access_token(OTHER_GUEST_ID, ActorRole.GUEST)}"}


# ============== 实体相关 Fixtures ==============

@pytest.fixture
def sample_room(db_session):
    """创建测试房间 101，每晚 288.00"""
    room = Room(
        number="101",
        room_type="standard",
        floor=1,
        capacity=2,
        price_per_night=Decimal("288.00"),
        status=RoomStatus.AVAILABLE
    )
    db_session.add(room)
    db_session.commit()
    db_session.refresh(room)
    return room


@pytest.fixture
def second_room(db_session):
    room = Room(
        number="102",
        room_type="deluxe",
        floor=1,
        capacity=2,
        price_per_night=Decimal("388.00"),
        status=RoomStatus.AVAILABLE
    )
    db_session.add(room)
    db_session.commit()
    db_session.refresh(room)
    return room


@pytest.fixture
def sample_menu_items(db_session):
    """菜品 A 价格 5.00，菜品 B 价格 7.50"""
    item_a = MenuItem(name="炒饭", category="主食", price=Decimal("5.00"), is_available=True)
    item_b = MenuItem(name="豆浆", category="饮品", price=Decimal("7.50"), is_available=True)
    db_session.add_all([item_a, item_b])
    db_session.commit()
    db_session.refresh(item_a)
    db_session.refresh(item_b)
    return item_a, item_b


@pytest.fixture
def sample_supplier(db_session):
    supplier = Supplier(
        name="绿源食品",
        email="sales@lvyuan.example",
        phone="021-12345678",
        address="上海市浦东新区"
    )
    db_session.add(supplier)
    db_session.commit()
    db_session.refresh(supplier)
    return supplier


@pytest.fixture
def sample_inventory_items(db_session):
    """两个库存项，初始数量为 0（无期初流水）"""
    towel = InventoryItem(name="毛巾", category="客房用品", unit="条", quantity=0,
                          min_quantity=20, price=Decimal("12.00"))
    soap = InventoryItem(name="香皂", category="客房用品", unit="块", quantity=0,
                         min_quantity=50, price=Decimal("3.50"))
    db_session.add_all([towel, soap])
    db_session.commit()
    db_session.refresh(towel)
    db_session.refresh(soap)
    return towel, soap
