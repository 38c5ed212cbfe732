# API Routers
from hotelops.routers import rooms, bookings, menu, food_orders, suppliers, inventory, purchase_orders

__all__ = ['rooms', 'bookings', 'menu', 'food_orders', 'suppliers', 'inventory', 'purchase_orders']
