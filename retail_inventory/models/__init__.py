"""
Models package - Database models for the retail inventory service
"""

# Import database instance
from retail_inventory.database import db

# Import enums first
from .enums import ProductStatus, OrderStatus, PaymentStatus, StockMovementType, ReferenceType

# Import models
from .product import Product
from .order import Order, OrderItem, ProductSnapshot
from .stock_movement import StockMovement
from .stock_in import StockIn

# Export all models and enums
__all__ = [
    'db',
    'ProductStatus',
    'OrderStatus',
    'PaymentStatus',
    'StockMovementType',
    'ReferenceType',
    'Product',
    'Order',
    'OrderItem',
    'ProductSnapshot',
    'StockMovement',
    'StockIn'
]
