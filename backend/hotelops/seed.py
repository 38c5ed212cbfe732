"""
初始化数据脚本
创建：房间、菜单、供应商、库存项，并打印开发用访问令牌

用法：
    python -m hotelops.seed
"""
from decimal import Decimal

from sqlalchemy.orm import Session

from hotelops.database import SessionLocal, init_db
from hotelops.models.ontology import ActorRole, MenuItem, Room, RoomStatus, Supplier
from hotelops.models.schemas import InventoryItemCreate
from hotelops.security.auth import create_access_token
from hotelops.services.inventory_service import InventoryService

SEED_ACTOR_ID = 1


def init_rooms(db: Session) -> int:
    """每层 4 间：1-2 层标准间，3 层大床房，4 层套房"""
    floors = {
        1: ("standard", Decimal("288.00"), 2),
        2: ("standard", Decimal("288.00"), 2),
        3: ("king", Decimal("388.00"), 2),
        4: ("suite", Decimal("888.00"), 4),
    }
    created = 0
    for floor, (room_type, price, capacity) in floors.items():
        for i in range(1, 5):
            number = f"{floor}{i:02d}"
            if db.query(Room).filter(Room.number == number).first():
                continue
            db.add(Room(number=number, room_type=room_type, floor=floor, capacity=capacity,
                        price_per_night=price, status=RoomStatus.AVAILABLE))
            created += 1
    db.commit()
    return created


def init_menu(db: Session) -> int:
    menu = [
        ("扬州炒饭", "主食", Decimal("38.00")),
        ("鲜虾馄饨", "主食", Decimal("32.00")),
        ("西湖醋鱼", "热菜", Decimal("88.00")),
        ("龙井虾仁", "热菜", Decimal("98.00")),
        ("鲜榨橙汁", "饮品", Decimal("28.00")),
        ("现磨咖啡", "饮品", Decimal("25.00")),
    ]
    created = 0
    for name, category, price in menu:
        if db.query(MenuItem).filter(MenuItem.name == name).first():
            continue
        db.add(MenuItem(name=name, category=category, price=price, is_available=True))
        created += 1
    db.commit()
    return created


def init_suppliers(db: Session) -> int:
    suppliers = [
        ("杭州布草供应", "linen@example.com", "0571-88880001", "杭州市西湖区文三路 1 号"),
        ("江南日化", "daily@example.com", "0571-88880002", "杭州市拱墅区湖墅南路 2 号"),
    ]
    created = 0
    for name, email, phone, address in suppliers:
        if db.query(Supplier).filter(Supplier.name == name).first():
            continue
        db.add(Supplier(name=name, email=email, phone=phone, address=address))
        created += 1
    db.commit()
    return created


def init_inventory(db: Session) -> int:
    """期初库存通过台账写入，保证流水与数量一致"""
    service = InventoryService(db)
    existing = {item.name for item in service.list_items(limit=1000)}
    items = [
        InventoryItemCreate(name="浴巾", category="布草", unit="条", quantity=120,
                            min_quantity=40, price=Decimal("35.00")),
        InventoryItemCreate(name="床单", category="布草", unit="张", quantity=80,
                            min_quantity=30, price=Decimal("60.00")),
        InventoryItemCreate(name="洗发水", category="洗护", unit="瓶", quantity=15,
                            min_quantity=50, price=Decimal("4.50")),
        InventoryItemCreate(name="牙具套装", category="洗护", unit="套", quantity=200,
                            min_quantity=100, price=Decimal("2.00")),
    ]
    created = 0
    for data in items:
        if data.name in existing:
            continue
        service.create_item(data, SEED_ACTOR_ID)
        created += 1
    return created


def seed(db: Session) -> dict:
    """写入全部种子数据，可重复执行"""
    return {
        "rooms": init_rooms(db),
        "menu_items": init_menu(db),
        "suppliers": init_suppliers(db),
        "inventory_items": init_inventory(db),
    }


def main():
    """主函数"""
    print("=" * 50)
    print("hotelops 初始化数据")
    print("=" * 50)

    init_db()
    print("数据库表创建完成")

    db = SessionLocal()
    try:
        stats = seed(db)
        print(f"初始化完成: {stats}")
        print()
        print("开发用访问令牌：")
        print(f"  admin: {create_access_token(SEED_ACTOR_ID, ActorRole.ADMIN)}")
        print(f"  staff: {create_access_token(2, ActorRole.STAFF)}")
        print(f"  guest: {create_access_token(100, ActorRole.GUEST)}")
        print("=" * 50)
    finally:
        db.close()


if __name__ == '__main__':
    main()
