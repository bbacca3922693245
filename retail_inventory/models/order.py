"""
Order and OrderItem Models
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import composite

from retail_inventory.database import db
from retail_inventory.utils.money import to_decimal
from .enums import OrderStatus, PaymentStatus, enum_values


@dataclass(frozen=True)
class ProductSnapshot:
    """
    Product attributes frozen at order-creation time.

    Financial math on historical orders reads these values only; the live
    Product row may since have been repriced, renamed or archived.
    """
    name: str
    sku: str
    size: Optional[str]
    color: Optional[str]
    unit_price: Decimal
    unit_cost: Decimal

    @classmethod
    def of(cls, product, size=None, color=None):
        return cls(
            name=product.name,
            sku=product.sku,
            size=product.size or size,
            color=product.color or color,
            unit_price=to_decimal(product.selling_price),
            unit_cost=to_decimal(product.hpp),
        )


class Order(db.Model):
    """Customer order; owns its items"""
    __tablename__ = 'orders'

    id = db.Column(db.Integer, primary_key=True)
    order_number = db.Column(db.String(32), unique=True, nullable=False, index=True)
    customer_name = db.Column(db.String(255), nullable=True)
    customer_phone = db.Column(db.String(50), nullable=True)
    total_amount = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    total_hpp = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    profit = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    status = db.Column(
        db.Enum(OrderStatus, values_callable=enum_values),
        nullable=False,
        default=OrderStatus.PENDING,
        index=True,
    )
    payment_status = db.Column(
        db.Enum(PaymentStatus, values_callable=enum_values),
        nullable=False,
        default=PaymentStatus.UNPAID,
    )
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.now, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    # Relationships
    items = db.relationship(
        'OrderItem',
        back_populates='order',
        cascade='all, delete-orphan',
        order_by='OrderItem.id',
        lazy='selectin',
    )

    def __repr__(self):
        return f'<Order {self.order_number}>'

    @property
    def is_terminal(self):
        return self.status in (OrderStatus.COMPLETED, OrderStatus.CANCELLED)

    def to_dict(self):
        """Convert to dictionary"""
        return {
            'id': self.id,
            'order_number': self.order_number,
            'customer_name': self.customer_name,
            'customer_phone': self.customer_phone,
            'total_amount': float(self.total_amount),
            'total_hpp': float(self.total_hpp),
            'profit': float(self.profit),
            'status': self.status.value,
            'payment_status': self.payment_status.value,
            'notes': self.notes,
            'items': [item.to_dict() for item in self.items],
            'created_at': self.created_at.isoformat(),
            'updated_at': self.updated_at.isoformat()
        }


class OrderItem(db.Model):
    """Order line carrying an immutable product snapshot"""
    __tablename__ = 'order_items'

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(
        db.Integer,
        db.ForeignKey('orders.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    # Traceability only; never joined for financial math
    product_id = db.Column(db.Integer, nullable=False, index=True)
    product_name = db.Column(db.String(255), nullable=False)
    product_sku = db.Column(db.String(100), nullable=False)
    size = db.Column(db.String(50), nullable=True)
    color = db.Column(db.String(50), nullable=True)
    quantity = db.Column(db.Integer, nullable=False)
    unit_price = db.Column(db.Numeric(12, 2), nullable=False)
    unit_hpp = db.Column(db.Numeric(12, 2), nullable=False)
    subtotal = db.Column(db.Numeric(12, 2), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.now, nullable=False)

    snapshot = composite(
        ProductSnapshot,
        product_name, product_sku, size, color, unit_price, unit_hpp,
    )

    order = db.relationship('Order', back_populates='items')

    def __repr__(self):
        return f'<OrderItem {self.product_sku} x {self.quantity}>'

    @classmethod
    def from_snapshot(cls, product_id, snapshot, quantity):
        return cls(
            product_id=product_id,
            snapshot=snapshot,
            quantity=quantity,
            subtotal=snapshot.unit_price * quantity,
        )

    @property
    def line_cost(self):
        return to_decimal(self.unit_hpp) * self.quantity

    def to_dict(self):
        """Convert to dictionary"""
        return {
            'id': self.id,
            'product_id': self.product_id,
            'product_name': self.product_name,
            'product_sku': self.product_sku,
            'size': self.size,
            'color': self.color,
            'quantity': self.quantity,
            'unit_price': float(self.unit_price),
            'unit_hpp': float(self.unit_hpp),
            'subtotal': float(self.subtotal),
        }
