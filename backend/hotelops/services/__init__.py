# Business Services
from hotelops.services.availability_service import AvailabilityService
from hotelops.services.booking_service import BookingService
from hotelops.services.room_service import RoomService
from hotelops.services.order_aggregator import OrderAggregator, OrderKind, OrderLine
from hotelops.services.menu_service import MenuService
from hotelops.services.food_order_service import FoodOrderService
from hotelops.services.supplier_service import SupplierService
from hotelops.services.inventory_service import InventoryService
from hotelops.services.purchase_service import PurchaseService

__all__ = [
    'AvailabilityService', 'BookingService', 'RoomService',
    'OrderAggregator', 'OrderKind', 'OrderLine',
    'MenuService', 'FoodOrderService', 'SupplierService',
    'InventoryService', 'PurchaseService'
]
