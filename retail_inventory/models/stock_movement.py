"""
Stock Movement Model
"""

from datetime import datetime

from retail_inventory.database import db
from .enums import StockMovementType, ReferenceType, enum_values


class StockMovement(db.Model):
    """Append-only audit row for every change to Product.stock"""
    __tablename__ = 'stock_movements'

    id = db.Column(db.Integer, primary_key=True)
    # Informational back-reference; no FK so history survives any product cleanup
    product_id = db.Column(db.Integer, nullable=False, index=True)
    movement_type = db.Column(db.Enum(StockMovementType, values_callable=enum_values), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)  # signed delta
    reference_type = db.Column(db.Enum(ReferenceType, values_callable=enum_values), nullable=True)
    reference_id = db.Column(db.Integer, nullable=True, index=True)
    notes = db.Column(db.Text, nullable=True)
    created_by = db.Column(db.String(100), default='system', nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.now, nullable=False, index=True)

    def __repr__(self):
        return f'<StockMovement {self.product_id} {self.movement_type.value} {self.quantity}>'

    def to_dict(self):
        """Convert to dictionary"""
        return {
            'id': self.id,
            'product_id': self.product_id,
            'movement_type': self.movement_type.value,
            'quantity': self.quantity,
            'reference_type': self.reference_type.value if self.reference_type else None,
            'reference_id': self.reference_id,
            'notes': self.notes,
            'created_by': self.created_by,
            'created_at': self.created_at.isoformat()
        }
