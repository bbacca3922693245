"""
Repositories package - Data access layer for the retail inventory service
"""

# Import interfaces
from .base import ProductRepositoryInterface, OrderRepositoryInterface, StockRepositoryInterface

# Import concrete implementations
from .product_repository import ProductRepository
from .order_repository import OrderRepository
from .stock_repository import StockRepository

# Export all interfaces and implementations
__all__ = [
    'ProductRepositoryInterface',
    'OrderRepositoryInterface',
    'StockRepositoryInterface',
    'ProductRepository',
    'OrderRepository',
    'StockRepository'
]
