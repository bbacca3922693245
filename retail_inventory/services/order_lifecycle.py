"""
Order Lifecycle Manager - status transitions and their compensating actions
"""

import logging
from typing import Union

from flask import current_app
from marshmallow import ValidationError

from retail_inventory.exceptions import OrderNotFound, InvalidTransition
from retail_inventory.models import Order, OrderStatus, StockMovementType, ReferenceType
from retail_inventory.repositories import OrderRepository
from .inventory_ledger import InventoryLedger
from .transaction import transactional

logger = logging.getLogger(__name__)

# pending is the only non-terminal state
ALLOWED_TRANSITIONS = {
    OrderStatus.PENDING: frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


class OrderLifecycleManager:
    """Moves orders through pending -> completed | cancelled"""

    def __init__(self, ledger=None, order_repo=None):
        self.ledger = ledger or InventoryLedger()
        self.order_repo = order_repo or OrderRepository()

    @staticmethod
    def _coerce_status(status: Union[str, OrderStatus]) -> OrderStatus:
        if isinstance(status, OrderStatus):
            return status
        try:
            return OrderStatus(status)
        except ValueError:
            allowed = ', '.join(s.value for s in OrderStatus)
            raise ValidationError({'status': [f'Must be one of: {allowed}.']})

    @transactional
    def transition(self, order_id: int, target: Union[str, OrderStatus]) -> Order:
        """
        Change an order's status.

        Cancelling a pending order returns every item's quantity to stock in
        the same transaction. Terminal orders reject every transition.
        """
        target = self._coerce_status(target)

        # Row lock serializes concurrent transitions of the same order
        order = self.order_repo.get_by_id(order_id, lock=True)
        if not order:
            raise OrderNotFound(order_id)

        current = order.status
        if not can_transition(current, target):
            logger.warning(
                f"Rejected status change for {order.order_number}: {current.value} -> {target.value}"
            )
            raise InvalidTransition(current.value, target.value)

        if target == OrderStatus.CANCELLED:
            self.restore_stock(order)

        order.status = target
        self.order_repo.add(order)

        current_app.logger.info(
            f"Order {order.order_number} status changed: {current.value} -> {target.value}"
        )
        return order

    def restore_stock(self, order: Order) -> None:
        """Add every item's quantity back to its product, one 'in' movement per item"""
        for item in sorted(order.items, key=lambda i: (i.product_id, i.id)):
            self.ledger.adjust_stock(
                item.product_id,
                item.quantity,
                movement_type=StockMovementType.IN,
                reference_type=ReferenceType.ORDER,
                reference_id=order.id,
                notes=f"Restock from order {order.order_number}",
                # Products archived after the sale still get their units back
                include_archived=True
            )
