"""
Inventory Ledger - the only code path that changes Product.stock
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
import logging

from marshmallow import ValidationError

from retail_inventory.exceptions import ProductNotFound, InsufficientStock
from retail_inventory.models import Product, StockIn, StockMovement, StockMovementType, ReferenceType
from retail_inventory.repositories import ProductRepository, StockRepository
from retail_inventory.utils.money import to_decimal, quantize_cents
from .transaction import transactional

logger = logging.getLogger(__name__)


def weighted_average_cost(old_cost, old_stock: int, incoming_cost, incoming_qty: int) -> Decimal:
    """
    Blend existing and incoming unit costs proportionally to quantity.

    (old_cost * old_stock + incoming_cost * incoming_qty) / (old_stock + incoming_qty),
    rounded half-up to cents. ``old_stock`` is the level before the receipt is added.
    """
    total_qty = old_stock + incoming_qty
    if total_qty <= 0:
        return quantize_cents(incoming_cost)
    blended = (to_decimal(old_cost) * old_stock + to_decimal(incoming_cost) * incoming_qty) / total_qty
    return quantize_cents(blended)


class InventoryLedger:
    """Locked read-modify-write access to product stock, with an audit trail"""

    def __init__(self, product_repo=None, stock_repo=None):
        self.product_repo = product_repo or ProductRepository()
        self.stock_repo = stock_repo or StockRepository()

    def lock_and_get(self, product_id: int, include_archived: bool = False) -> Product:
        """
        Lock a product row for the rest of the enclosing transaction and return it.

        Must precede every read used for a stock decision.
        """
        product = self.product_repo.lock_and_get(product_id, include_archived=include_archived)
        if not product:
            raise ProductNotFound(product_id)
        return product

    def lock_products(self, product_ids: List[int]) -> List[Product]:
        """Pre-lock several products in ascending id order"""
        return self.product_repo.lock_many(product_ids)

    @transactional
    def adjust_stock(self, product_id: int, delta: int,
                     movement_type: Optional[StockMovementType] = None,
                     reference_type: Optional[ReferenceType] = None,
                     reference_id: Optional[int] = None,
                     notes: Optional[str] = None,
                     include_archived: bool = False) -> Product:
        """
        Apply a signed delta to a product's stock and record one movement.

        Raises InsufficientStock when the result would be negative.
        """
        if delta == 0:
            raise ValidationError({'quantity': ['Stock adjustment must be non-zero.']})

        product = self.lock_and_get(product_id, include_archived=include_archived)
        new_stock = product.stock + delta
        if new_stock < 0:
            raise InsufficientStock(product.id, product.name, product.stock, -delta)

        if movement_type is None:
            movement_type = StockMovementType.IN if delta > 0 else StockMovementType.OUT

        product.stock = new_stock
        self.stock_repo.add_movement(
            product_id=product.id,
            movement_type=movement_type,
            quantity=delta,
            reference_type=reference_type,
            reference_id=reference_id,
            notes=notes
        )

        logger.debug(
            f"Stock {movement_type.value} for product {product.id}: {delta:+d} -> {new_stock}"
        )
        return product

    def recompute_weighted_cost(self, product_id: int, incoming_qty: int, incoming_unit_cost) -> Decimal:
        """Update the product's unit cost (hpp) for incoming goods; stock itself is untouched"""
        product = self.lock_and_get(product_id)
        new_cost = weighted_average_cost(product.hpp, product.stock, incoming_unit_cost, incoming_qty)
        product.hpp = new_cost
        return new_cost

    @transactional
    def add_stock(self, product_id: int, quantity: int, unit_cost,
                  supplier: Optional[str] = None, notes: Optional[str] = None) -> StockIn:
        """
        Receive goods: record the stock-in, blend the unit cost, then raise stock.
        """
        if quantity is None or quantity < 1:
            raise ValidationError({'quantity': ['Must be greater than or equal to 1.']})
        if to_decimal(unit_cost) < 0:
            raise ValidationError({'unit_cost': ['Must be greater than or equal to 0.']})

        product = self.lock_and_get(product_id)
        stock_in = self.stock_repo.add_stock_in(
            product_id=product.id,
            quantity=quantity,
            unit_cost=to_decimal(unit_cost),
            supplier=supplier,
            notes=notes
        )

        # Cost blend uses the stock level from before this receipt
        new_cost = self.recompute_weighted_cost(product.id, quantity, unit_cost)
        self.adjust_stock(
            product.id,
            quantity,
            movement_type=StockMovementType.IN,
            reference_type=ReferenceType.STOCK_IN,
            reference_id=stock_in.id,
            notes=notes
        )

        logger.info(
            f"Stock in #{stock_in.id}: product {product.id} +{quantity} @ {unit_cost}, "
            f"new unit cost {new_cost}, stock {product.stock}"
        )
        return stock_in

    def list_movements(self, product_id: Optional[int] = None, start: Optional[datetime] = None,
                       end: Optional[datetime] = None) -> List[StockMovement]:
        """Stock movements newest first, filtered by product and/or date range"""
        return self.stock_repo.list_movements(product_id=product_id, start=start, end=end)
