"""
Stock Repository Implementation
"""

from datetime import datetime
from typing import List, Optional

from retail_inventory.database import db
from retail_inventory.models import StockMovement, StockIn, ReferenceType
from .base import StockRepositoryInterface


class StockRepository(StockRepositoryInterface):
    """Stock movement audit trail and stock-in records"""

    def add_movement(self, **kwargs) -> StockMovement:
        """Append a stock movement record"""
        movement = StockMovement(
            product_id=kwargs['product_id'],
            movement_type=kwargs['movement_type'],
            quantity=kwargs['quantity'],
            reference_type=kwargs.get('reference_type'),
            reference_id=kwargs.get('reference_id'),
            notes=kwargs.get('notes'),
            created_by=kwargs.get('created_by') or 'system'
        )
        db.session.add(movement)
        return movement

    def list_movements(self, product_id: Optional[int] = None, start: Optional[datetime] = None,
                       end: Optional[datetime] = None) -> List[StockMovement]:
        """Stock movements newest first"""
        query = StockMovement.query
        if product_id is not None:
            query = query.filter(StockMovement.product_id == product_id)
        if start is not None:
            query = query.filter(StockMovement.created_at >= start)
        if end is not None:
            query = query.filter(StockMovement.created_at <= end)
        return query.order_by(StockMovement.created_at.desc(), StockMovement.id.desc()).all()

    def movements_for_reference(self, reference_type: ReferenceType, reference_id: int) -> List[StockMovement]:
        return StockMovement.query.filter_by(
            reference_type=reference_type,
            reference_id=reference_id
        ).order_by(StockMovement.id.asc()).all()

    def add_stock_in(self, **kwargs) -> StockIn:
        """Stage a stock-in record and assign its id"""
        stock_in = StockIn(
            product_id=kwargs['product_id'],
            quantity=kwargs['quantity'],
            unit_cost=kwargs['unit_cost'],
            supplier=kwargs.get('supplier'),
            notes=kwargs.get('notes')
        )
        db.session.add(stock_in)
        db.session.flush()
        return stock_in
