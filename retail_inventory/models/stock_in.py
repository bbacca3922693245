"""
Stock In Model
"""

from datetime import datetime

from retail_inventory.database import db


class StockIn(db.Model):
    """Goods-received record; drives the weighted-average cost of a product"""
    __tablename__ = 'stock_in'

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(db.Integer, nullable=False, index=True)
    quantity = db.Column(db.Integer, nullable=False)
    unit_cost = db.Column(db.Numeric(12, 2), nullable=False)
    supplier = db.Column(db.String(255), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.now, nullable=False)

    def __repr__(self):
        return f'<StockIn {self.product_id} +{self.quantity}>'

    def to_dict(self):
        return {
            'id': self.id,
            'product_id': self.product_id,
            'quantity': self.quantity,
            'unit_cost': float(self.unit_cost),
            'supplier': self.supplier,
            'notes': self.notes,
            'created_at': self.created_at.isoformat()
        }
