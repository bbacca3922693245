"""
Order Repository Implementation
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import func

from retail_inventory.database import db
from retail_inventory.models import Order, OrderStatus
from .base import OrderRepositoryInterface


class OrderRepository(OrderRepositoryInterface):
    """Concrete implementation of order repository"""

    def get_by_id(self, order_id: int, lock: bool = False) -> Optional[Order]:
        """Get order by ID, optionally taking a row lock"""
        query = Order.query.filter(Order.id == order_id)
        if lock:
            query = query.with_for_update().populate_existing()
        return query.first()

    def list(self, start: Optional[datetime] = None, end: Optional[datetime] = None) -> List[Order]:
        """Orders newest first, optionally within [start, end]"""
        query = Order.query
        if start is not None:
            query = query.filter(Order.created_at >= start)
        if end is not None:
            query = query.filter(Order.created_at <= end)
        return query.order_by(Order.created_at.desc(), Order.id.desc()).all()

    def list_completed_between(self, start: datetime, end: datetime) -> List[Order]:
        return (
            Order.query
            .filter(
                Order.status == OrderStatus.COMPLETED,
                Order.created_at >= start,
                Order.created_at <= end,
            )
            .order_by(Order.created_at.asc())
            .all()
        )

    def count_created_between(self, start: datetime, end: datetime) -> int:
        return Order.query.filter(
            Order.created_at >= start,
            Order.created_at <= end
        ).count()

    def last_order_number(self, prefix: str) -> Optional[str]:
        """Highest order number starting with prefix (longer numbers sort higher)"""
        row = (
            db.session.query(Order.order_number)
            .filter(Order.order_number.like(f"{prefix}%"))
            .order_by(func.length(Order.order_number).desc(), Order.order_number.desc())
            .first()
        )
        return row[0] if row else None

    def add(self, order: Order) -> Order:
        """Stage a new order and assign its id"""
        db.session.add(order)
        db.session.flush()
        return order

    def delete(self, order: Order) -> None:
        db.session.delete(order)
        db.session.flush()
