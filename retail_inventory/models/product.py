"""
Product Model
"""

from datetime import datetime
from sqlalchemy import CheckConstraint
from sqlalchemy.orm import validates

from retail_inventory.database import db
from .enums import ProductStatus, enum_values


class Product(db.Model):
    """Sellable product and the single source of truth for its stock level"""
    __tablename__ = 'products'
    __table_args__ = (
        CheckConstraint('stock >= 0', name='ck_products_stock_non_negative'),
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    sku = db.Column(db.String(100), nullable=False, index=True)
    # Mirrors sku while active, NULL once archived; unique so SKUs can be reused after archiving
    active_sku = db.Column(db.String(100), unique=True, nullable=True)
    category = db.Column(db.String(100), nullable=True)
    size = db.Column(db.String(50), nullable=True)
    color = db.Column(db.String(50), nullable=True)
    hpp = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    selling_price = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    stock = db.Column(db.Integer, nullable=False, default=0)
    min_stock = db.Column(db.Integer, nullable=False, default=5)
    description = db.Column(db.Text, nullable=True)
    status = db.Column(
        db.Enum(ProductStatus, values_callable=enum_values),
        nullable=False,
        default=ProductStatus.ACTIVE,
    )
    created_at = db.Column(db.DateTime, default=datetime.now, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    def __repr__(self):
        return f'<Product {self.sku}>'

    @validates('sku')
    def _sync_active_sku_from_sku(self, key, value):
        if self.is_active:
            self.active_sku = value
        return value

    @validates('status')
    def _sync_active_sku_from_status(self, key, value):
        self.active_sku = self.sku if value == ProductStatus.ACTIVE else None
        return value

    @property
    def is_active(self):
        return self.status in (None, ProductStatus.ACTIVE)

    @property
    def is_low_stock(self):
        """Check if stock is below the minimum threshold"""
        return self.stock < self.min_stock

    def archive(self):
        """Soft delete; the row stays for order and movement history"""
        self.status = ProductStatus.ARCHIVED

    def to_dict(self):
        """Convert to dictionary"""
        return {
            'id': self.id,
            'name': self.name,
            'sku': self.sku,
            'category': self.category,
            'size': self.size,
            'color': self.color,
            'hpp': float(self.hpp) if self.hpp is not None else 0.0,
            'selling_price': float(self.selling_price) if self.selling_price is not None else 0.0,
            'stock': self.stock,
            'min_stock': self.min_stock,
            'description': self.description,
            'status': self.status.value if self.status else ProductStatus.ACTIVE.value,
            'is_low_stock': self.is_low_stock,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }
