"""
Pydantic 模式定义
用于 API 请求/响应验证
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict
from hotelops.models.ontology import (
    RoomStatus, BookingStatus, FoodOrderStatus, PurchaseOrderStatus,
    TransactionType, TransactionSource
)


# ============== 房间 Schemas ==============

class RoomBase(BaseModel):
    number: str = Field(..., max_length=10)
    room_type: str = Field(default="standard", max_length=50)
    floor: int = 1
    description: Optional[str] = None
    capacity: int = Field(default=2, ge=1)
    price_per_night: Decimal = Field(..., ge=0)


class RoomCreate(RoomBase):
    status: RoomStatus = RoomStatus.AVAILABLE


class RoomUpdate(BaseModel):
    number: Optional[str] = Field(None, max_length=10)
    room_type: Optional[str] = Field(None, max_length=50)
    floor: Optional[int] = None
    description: Optional[str] = None
    capacity: Optional[int] = Field(None, ge=1)
    price_per_night: Optional[Decimal] = Field(None, ge=0)


class RoomStatusUpdate(BaseModel):
    status: RoomStatus


class RoomResponse(RoomBase):
    id: int
    status: RoomStatus
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


# ============== 预订 Schemas ==============

class BookingCreate(BaseModel):
    room_id: int
    start_date: datetime
    end_date: datetime


class BookingResponse(BaseModel):
    id: int
    room_id: int
    user_id: int
    start_date: datetime
    end_date: datetime
    total_price: Decimal
    status: BookingStatus
    created_at: datetime
    room: Optional[RoomResponse] = None
    model_config = ConfigDict(from_attributes=True)


# ============== 菜单 Schemas ==============

class MenuItemBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    category: str = Field(..., min_length=1, max_length=50)
    price: Decimal = Field(..., gt=0)
    is_available: bool = True


class MenuItemCreate(MenuItemBase):
    pass


class MenuItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    price: Optional[Decimal] = Field(None, gt=0)
    is_available: Optional[bool] = None


class MenuItemResponse(MenuItemBase):
    id: int
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


# ============== 餐饮订单 Schemas ==============

class FoodOrderLine(BaseModel):
    menu_item_id: int
    quantity: int = Field(..., ge=1)
    notes: Optional[str] = None


class FoodOrderCreate(BaseModel):
    room_id: Optional[int] = None
    items: List[FoodOrderLine] = Field(..., min_length=1)
    notes: Optional[str] = None


class FoodOrderStatusUpdate(BaseModel):
    status: FoodOrderStatus


class FoodOrderItemResponse(BaseModel):
    id: int
    menu_item_id: int
    quantity: int
    price: Decimal
    notes: Optional[str] = None
    menu_item: Optional[MenuItemResponse] = None
    model_config = ConfigDict(from_attributes=True)


class FoodOrderResponse(BaseModel):
    id: int
    user_id: int
    room_id: Optional[int] = None
    status: FoodOrderStatus
    total_price: Decimal
    notes: Optional[str] = None
    items: List[FoodOrderItemResponse] = []
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


# ============== 供应商 Schemas ==============

class SupplierBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=1, max_length=100)
    phone: str = Field(..., min_length=1, max_length=20)
    address: str = Field(..., min_length=1)
    description: Optional[str] = None


class SupplierCreate(SupplierBase):
    pass


class SupplierResponse(SupplierBase):
    id: int
    is_active: bool
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


# ============== 库存 Schemas ==============

class InventoryItemBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    category: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = None
    unit: str = Field(..., min_length=1, max_length=20)
    min_quantity: int = Field(default=0, ge=0)
    price: Decimal = Field(default=Decimal("0"), ge=0)


class InventoryItemCreate(InventoryItemBase):
    quantity: int = Field(default=0, ge=0)


class InventoryItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    description: Optional[str] = None
    unit: Optional[str] = Field(None, min_length=1, max_length=20)
    min_quantity: Optional[int] = Field(None, ge=0)
    price: Optional[Decimal] = Field(None, ge=0)


class InventoryItemResponse(InventoryItemBase):
    id: int
    quantity: int
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class QuantityAdjust(BaseModel):
    quantity: int = Field(..., ge=0)
    notes: Optional[str] = None


class ConsumptionCreate(BaseModel):
    quantity: int = Field(..., ge=1)
    notes: Optional[str] = None


class InventoryTransactionResponse(BaseModel):
    id: int
    inventory_item_id: int
    quantity: int
    type: TransactionType
    source: TransactionSource
    source_id: Optional[int] = None
    notes: Optional[str] = None
    created_by: int
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class ReconcileResponse(BaseModel):
    item_id: int
    quantity: int
    ledger_balance: int
    consistent: bool


# ============== 采购订单 Schemas ==============

class PurchaseOrderLine(BaseModel):
    inventory_item_id: int
    quantity: int = Field(..., ge=1)


class PurchaseOrderCreate(BaseModel):
    supplier_id: int
    items: List[PurchaseOrderLine] = Field(..., min_length=1)
    notes: Optional[str] = None


class PurchaseOrderStatusUpdate(BaseModel):
    status: PurchaseOrderStatus


class PurchaseOrderItemResponse(BaseModel):
    id: int
    inventory_item_id: int
    quantity: int
    price: Decimal
    model_config = ConfigDict(from_attributes=True)


class PurchaseOrderResponse(BaseModel):
    id: int
    supplier_id: int
    status: PurchaseOrderStatus
    total_price: Decimal
    notes: Optional[str] = None
    order_date: datetime
    delivery_date: Optional[datetime] = None
    created_by: int
    items: List[PurchaseOrderItemResponse] = []
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)
