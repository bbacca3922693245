"""
Order Service - order creation, lookup and deletion
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union
import logging

from marshmallow import ValidationError

from retail_inventory.exceptions import OrderNotFound, InsufficientStock
from retail_inventory.models import (
    Order, OrderItem, OrderStatus, PaymentStatus, ProductSnapshot,
    StockMovementType, ReferenceType
)
from retail_inventory.repositories import OrderRepository
from .inventory_ledger import InventoryLedger
from .order_lifecycle import OrderLifecycleManager
from .order_sequence import OrderSequenceGenerator
from .transaction import transactional

logger = logging.getLogger(__name__)


class OrderService:
    """Business logic for orders"""

    def __init__(self, ledger=None, sequence=None, lifecycle=None, order_repo=None):
        self.order_repo = order_repo or OrderRepository()
        self.ledger = ledger or InventoryLedger()
        self.sequence = sequence or OrderSequenceGenerator(self.order_repo)
        self.lifecycle = lifecycle or OrderLifecycleManager(self.ledger, self.order_repo)

    @staticmethod
    def _check_items(items: List[Dict[str, Any]]) -> None:
        if not items:
            raise ValidationError({'items': ['At least one item is required.']})
        for index, item in enumerate(items):
            if item.get('product_id') is None:
                raise ValidationError({'items': {index: {'product_id': ['Missing data for required field.']}}})
            if item.get('quantity') is None or item['quantity'] < 1:
                raise ValidationError({'items': {index: {'quantity': ['Must be greater than or equal to 1.']}}})

    @transactional
    def create_order(self, items: List[Dict[str, Any]], customer_name: Optional[str] = None,
                     customer_phone: Optional[str] = None, notes: Optional[str] = None) -> Order:
        """
        Create an order and take its items out of stock, all or nothing.

        Args:
            items: List of {'product_id': int, 'quantity': int, 'size': str?, 'color': str?}

        Raises:
            ProductNotFound, InsufficientStock: nothing is written
            TransactionConflict: lock timeout, deadlock or order-number collision
                persisted after the automatic retry
        """
        self._check_items(items)

        now = datetime.now()
        order = Order(
            order_number=self.sequence.next(now),
            customer_name=customer_name,
            customer_phone=customer_phone,
            notes=notes,
            status=OrderStatus.PENDING,
            payment_status=PaymentStatus.UNPAID,
            total_amount=Decimal('0'),
            total_hpp=Decimal('0'),
            profit=Decimal('0'),
            created_at=now,
            updated_at=now
        )
        # Flush early: assigns the id movements refer to and trips the order_number constraint
        self.order_repo.add(order)

        # Ascending-id lock acquisition rules out lock-order inversion between orders
        self.ledger.lock_products([item['product_id'] for item in items])

        total_amount = Decimal('0')
        total_hpp = Decimal('0')

        # Items are checked and applied in submission order
        for requested in items:
            quantity = requested['quantity']
            product = self.ledger.lock_and_get(requested['product_id'])

            if product.stock < quantity:
                logger.warning(
                    f"Insufficient stock for {product.sku}: available {product.stock}, requested {quantity}"
                )
                raise InsufficientStock(product.id, product.name, product.stock, quantity)

            snapshot = ProductSnapshot.of(product, size=requested.get('size'), color=requested.get('color'))
            order_item = OrderItem.from_snapshot(product.id, snapshot, quantity)
            total_amount += order_item.subtotal
            total_hpp += snapshot.unit_cost * quantity

            self.ledger.adjust_stock(
                product.id,
                -quantity,
                movement_type=StockMovementType.OUT,
                reference_type=ReferenceType.ORDER,
                reference_id=order.id,
                notes=f"Sold in order {order.order_number}"
            )
            order.items.append(order_item)

        order.total_amount = total_amount
        order.total_hpp = total_hpp
        order.profit = total_amount - total_hpp
        self.order_repo.add(order)

        logger.info(
            f"Created order {order.order_number}: {len(order.items)} item(s), "
            f"amount {total_amount}, cost {total_hpp}, profit {order.profit}"
        )
        return order

    def get_order(self, order_id: int) -> Order:
        order = self.order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(order_id)
        return order

    def list_orders(self, start: Optional[datetime] = None, end: Optional[datetime] = None) -> List[Order]:
        """Orders newest first, optionally limited to a created_at window"""
        return self.order_repo.list(start=start, end=end)

    def update_status(self, order_id: int, status: Union[str, OrderStatus]) -> Order:
        return self.lifecycle.transition(order_id, status)

    @transactional
    def delete_order(self, order_id: int) -> None:
        """
        Hard-delete an order and its items.

        A pending order still holds stock, so its quantities are restored first
        exactly as a cancellation would. Movement history is kept.
        """
        order = self.order_repo.get_by_id(order_id, lock=True)
        if not order:
            raise OrderNotFound(order_id)

        if not order.is_terminal:
            self.lifecycle.restore_stock(order)

        order_number = order.order_number
        self.order_repo.delete(order)
        logger.info(f"Deleted order {order_number}")
