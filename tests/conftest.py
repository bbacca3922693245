import os
import uuid
import pytest
from datetime import datetime
from decimal import Decimal

# Set test environment variables before importing the app
os.environ['FLASK_ENV'] = 'testing'

from retail_inventory import create_app
from retail_inventory.models import db, Product, Order, OrderStatus


@pytest.fixture(scope='session')
def app():
    """Create application for the tests."""
    app = create_app('testing')

    with app.app_context():
        # Create all database tables
        db.create_all()
        yield app
        # Clean up
        db.drop_all()


@pytest.fixture
def client(app):
    """A test client for the app."""
    return app.test_client()


@pytest.fixture
def db_session(app):
    """Create a database session for a test."""
    with app.app_context():
        db.create_all()

        yield db.session

        # Clean up tables
        db.session.rollback()
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()


@pytest.fixture
def make_product(db_session):
    """Factory for products inserted directly, bypassing the ledger."""
    def _make_product(**kwargs):
        defaults = {
            'name': 'Test Product',
            'sku': f'SKU-{str(uuid.uuid4())[:8]}',  # Generate unique SKU
            'hpp': Decimal('10000'),
            'selling_price': Decimal('15000'),
            'stock': 20,
            'min_stock': 5
        }
        defaults.update(kwargs)

        product = Product(**defaults)
        db_session.add(product)
        db_session.commit()
        return product

    return _make_product


@pytest.fixture
def make_order(db_session):
    """Factory for bare order rows (no items, no stock effect)."""
    def _make_order(**kwargs):
        defaults = {
            'order_number': 'ORD-20250101-0001',
            'status': OrderStatus.PENDING,
            'total_amount': Decimal('0'),
            'total_hpp': Decimal('0'),
            'profit': Decimal('0'),
            'created_at': datetime(2025, 1, 1, 10, 0, 0)
        }
        defaults.update(kwargs)

        order = Order(**defaults)
        db_session.add(order)
        db_session.commit()
        return order

    return _make_order


@pytest.fixture
def sample_product(make_product):
    """Product P: stock 10, price 50000, cost 30000."""
    return make_product(
        name='Kaos Polos',
        sku='KP-001',
        selling_price=Decimal('50000'),
        hpp=Decimal('30000'),
        stock=10
    )
