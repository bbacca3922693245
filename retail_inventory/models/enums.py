"""
Model Enums
"""

from enum import Enum


class ProductStatus(Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"


class OrderStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    UNPAID = "unpaid"
    PAID = "paid"


class StockMovementType(Enum):
    IN = "in"
    OUT = "out"
    ADJUSTMENT = "adjustment"


class ReferenceType(Enum):
    ORDER = "order"
    STOCK_IN = "stock_in"


def enum_values(enum_cls):
    """Persist enum values ('pending') rather than member names ('PENDING')"""
    return [member.value for member in enum_cls]
