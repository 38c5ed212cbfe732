# Ontology Models
from hotelops.models.ontology import (
    Room, Booking, MenuItem, FoodOrder, FoodOrderItem,
    Supplier, InventoryItem, PurchaseOrder, PurchaseOrderItem, InventoryTransaction
)

__all__ = [
    'Room', 'Booking', 'MenuItem', 'FoodOrder', 'FoodOrderItem',
    'Supplier', 'InventoryItem', 'PurchaseOrder', 'PurchaseOrderItem', 'InventoryTransaction'
]
