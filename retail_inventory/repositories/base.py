"""
Base Repository Interface - Abstract base classes

Repositories only read, add and flush. Committing or rolling back is the
job of the service-level transaction that encloses them.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from retail_inventory.models import Product, Order, StockMovement, StockIn, ReferenceType


class ProductRepositoryInterface(ABC):
    """Abstract base class for product repository"""

    @abstractmethod
    def get_by_id(self, product_id: int, include_archived: bool = False) -> Optional[Product]:
        pass

    @abstractmethod
    def lock_and_get(self, product_id: int, include_archived: bool = False) -> Optional[Product]:
        pass

    @abstractmethod
    def lock_many(self, product_ids: List[int]) -> List[Product]:
        pass

    @abstractmethod
    def get_active_by_sku(self, sku: str) -> Optional[Product]:
        pass

    @abstractmethod
    def add(self, product: Product) -> Product:
        pass

    @abstractmethod
    def get_low_stock(self) -> List[Product]:
        pass


class OrderRepositoryInterface(ABC):
    """Abstract base class for order repository"""

    @abstractmethod
    def get_by_id(self, order_id: int, lock: bool = False) -> Optional[Order]:
        pass

    @abstractmethod
    def list(self, start: Optional[datetime] = None, end: Optional[datetime] = None) -> List[Order]:
        pass

    @abstractmethod
    def list_completed_between(self, start: datetime, end: datetime) -> List[Order]:
        pass

    @abstractmethod
    def count_created_between(self, start: datetime, end: datetime) -> int:
        pass

    @abstractmethod
    def last_order_number(self, prefix: str) -> Optional[str]:
        pass

    @abstractmethod
    def add(self, order: Order) -> Order:
        pass

    @abstractmethod
    def delete(self, order: Order) -> None:
        pass


class StockRepositoryInterface(ABC):
    """Abstract base class for stock movement and stock-in records"""

    @abstractmethod
    def add_movement(self, **kwargs) -> StockMovement:
        pass

    @abstractmethod
    def list_movements(self, product_id: Optional[int] = None, start: Optional[datetime] = None,
                       end: Optional[datetime] = None) -> List[StockMovement]:
        pass

    @abstractmethod
    def movements_for_reference(self, reference_type: ReferenceType, reference_id: int) -> List[StockMovement]:
        pass

    @abstractmethod
    def add_stock_in(self, **kwargs) -> StockIn:
        pass
