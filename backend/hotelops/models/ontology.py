"""
本体对象定义
房间/预订、菜单/餐饮订单、库存/供应商/采购订单、库存流水
"""
from enum import Enum
from sqlalchemy import (
    Column, Integer, String, DateTime, ForeignKey, Text,
    Enum as SQLEnum, Boolean, Numeric
)
from sqlalchemy.orm import relationship

from hotelops.clock import utcnow
from hotelops.database import Base


# ============== 枚举定义 ==============

class RoomStatus(str, Enum):
    """房间状态"""
    AVAILABLE = "available"        # 可预订
    OCCUPIED = "occupied"          # 入住中
    MAINTENANCE = "maintenance"    # 维修中


class BookingStatus(str, Enum):
    """预订状态"""
    CONFIRMED = "confirmed"    # 已确认
    CANCELLED = "cancelled"    # 已取消
    COMPLETED = "completed"    # 已完成


class FoodOrderStatus(str, Enum):
    """餐饮订单状态"""
    PENDING = "pending"        # 待处理
    PREPARING = "preparing"    # 制作中
    DELIVERED = "delivered"    # 已送达
    CANCELLED = "cancelled"    # 已取消


class PurchaseOrderStatus(str, Enum):
    """采购订单状态"""
    PENDING = "pending"        # 待审批
    APPROVED = "approved"      # 已审批
    RECEIVED = "received"      # 已收货
    CANCELLED = "cancelled"    # 已取消


class TransactionType(str, Enum):
    """库存流水方向"""
    IN = "in"
    OUT = "out"


class TransactionSource(str, Enum):
    """库存流水来源"""
    PURCHASE_ORDER = "purchase_order"  # 采购收货
    ADJUSTMENT = "adjustment"          # 盘点调整
    CONSUMPTION = "consumption"        # 领用消耗


class ActorRole(str, Enum):
    """调用方角色（由 JWT 提供）"""
    ADMIN = "admin"
    STAFF = "staff"
    GUEST = "guest"


# ============== 房间与预订 ==============

class Room(Base):
    """房间对象"""
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    number = Column(String(10), unique=True, nullable=False)       # 房间号
    room_type = Column(String(50), nullable=False, default="standard")
    floor = Column(Integer, nullable=False, default=1)
    description = Column(Text)
    capacity = Column(Integer, nullable=False, default=2)
    price_per_night = Column(Numeric(10, 2), nullable=False)
    status = Column(SQLEnum(RoomStatus), nullable=False, default=RoomStatus.AVAILABLE)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # 链接
    bookings = relationship("Booking", back_populates="room")


class Booking(Base):
    """
    预订对象
    区间为 [start_date, end_date)，end_date 不含
    """
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)
    status = Column(SQLEnum(BookingStatus), nullable=False, default=BookingStatus.CONFIRMED)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    room = relationship("Room", back_populates="bookings")


# ============== 菜单与餐饮订单 ==============

class MenuItem(Base):
    """菜单项"""
    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text)
    category = Column(String(50), nullable=False, index=True)
    price = Column(Numeric(10, 2), nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class FoodOrder(Base):
    """
    餐饮订单 - 聚合根
    total_price 恒等于明细 price 之和
    """
    __tablename__ = "food_orders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=True)
    status = Column(SQLEnum(FoodOrderStatus), nullable=False, default=FoodOrderStatus.PENDING)
    total_price = Column(Numeric(10, 2), nullable=False, default=0)
    notes = Column(Text)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    items = relationship("FoodOrderItem", back_populates="order", order_by="FoodOrderItem.id")
    room = relationship("Room")


class FoodOrderItem(Base):
    """餐饮订单明细，创建后不可修改"""
    __tablename__ = "food_order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("food_orders.id"), nullable=False, index=True)
    menu_item_id = Column(Integer, ForeignKey("menu_items.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)     # 单价 × 数量
    notes = Column(Text)
    created_at = Column(DateTime, default=utcnow)

    order = relationship("FoodOrder", back_populates="items")
    menu_item = relationship("MenuItem")


# ============== 库存与采购 ==============

class Supplier(Base):
    """供应商"""
    __tablename__ = "suppliers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(100), nullable=False)
    phone = Column(String(20), nullable=False)
    address = Column(Text, nullable=False)
    description = Column(Text)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    purchase_orders = relationship("PurchaseOrder", back_populates="supplier")


class InventoryItem(Base):
    """
    库存项
    quantity 的每次变化都必须对应一条 InventoryTransaction；
    version 为乐观锁版本号，并发写入时后提交者失败
    """
    __tablename__ = "inventory_items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    category = Column(String(50), nullable=False, index=True)
    description = Column(Text)
    quantity = Column(Integer, nullable=False, default=0)
    unit = Column(String(20), nullable=False)
    min_quantity = Column(Integer, nullable=False, default=0)     # 低库存阈值
    price = Column(Numeric(10, 2), nullable=False, default=0)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    transactions = relationship("InventoryTransaction", back_populates="inventory_item")

    __mapper_args__ = {"version_id_col": version}


class PurchaseOrder(Base):
    """
    采购订单 - 聚合根
    状态转入 received 时一次性入库
    """
    __tablename__ = "purchase_orders"

    id = Column(Integer, primary_key=True, index=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=False, index=True)
    status = Column(SQLEnum(PurchaseOrderStatus), nullable=False, default=PurchaseOrderStatus.PENDING)
    total_price = Column(Numeric(10, 2), nullable=False, default=0)
    notes = Column(Text)
    order_date = Column(DateTime, default=utcnow)
    delivery_date = Column(DateTime)                   # 收货时间
    created_by = Column(Integer, nullable=False)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    supplier = relationship("Supplier", back_populates="purchase_orders")
    items = relationship("PurchaseOrderItem", back_populates="order", order_by="PurchaseOrderItem.id")

    __mapper_args__ = {"version_id_col": version}


class PurchaseOrderItem(Base):
    """采购订单明细，创建后不可修改"""
    __tablename__ = "purchase_order_items"

    id = Column(Integer, primary_key=True, index=True)
    purchase_order_id = Column(Integer, ForeignKey("purchase_orders.id"), nullable=False, index=True)
    inventory_item_id = Column(Integer, ForeignKey("inventory_items.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime, default=utcnow)

    order = relationship("PurchaseOrder", back_populates="items")
    inventory_item = relationship("InventoryItem")


class InventoryTransaction(Base):
    """
    库存流水（只追加）
    quantity 为变化量绝对值，方向由 type 决定
    """
    __tablename__ = "inventory_transactions"

    id = Column(Integer, primary_key=True, index=True)
    inventory_item_id = Column(Integer, ForeignKey("inventory_items.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    type = Column(SQLEnum(TransactionType), nullable=False)
    source = Column(SQLEnum(TransactionSource), nullable=False)
    source_id = Column(Integer, nullable=True)
    notes = Column(Text)
    created_by = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=utcnow)

    inventory_item = relationship("InventoryItem", back_populates="transactions")
