"""
Product Service - product intake and soft deletion
"""

import logging
from typing import List

from flask import current_app

from retail_inventory.exceptions import ProductNotFound, DuplicateSku
from retail_inventory.models import Product, StockMovementType
from retail_inventory.repositories import ProductRepository
from retail_inventory.utils.money import to_decimal
from .inventory_ledger import InventoryLedger
from .transaction import transactional

logger = logging.getLogger(__name__)

# No stock here: it only moves through the ledger
UPDATABLE_FIELDS = (
    'name', 'sku', 'category', 'size', 'color', 'hpp',
    'selling_price', 'min_stock', 'description'
)
MONEY_FIELDS = ('hpp', 'selling_price')


class ProductService:
    """Business logic for product intake"""

    def __init__(self, product_repo=None, ledger=None):
        self.product_repo = product_repo or ProductRepository()
        self.ledger = ledger or InventoryLedger(self.product_repo)

    def _ensure_sku_free(self, sku: str, exclude_id: int = None) -> None:
        existing = self.product_repo.get_active_by_sku(sku)
        if existing and existing.id != exclude_id:
            raise DuplicateSku(sku)

    def get_product(self, product_id: int) -> Product:
        product = self.product_repo.get_by_id(product_id)
        if not product:
            raise ProductNotFound(product_id)
        return product

    def list_low_stock(self) -> List[Product]:
        """Active products whose stock is below min_stock"""
        return self.product_repo.get_low_stock()

    @transactional
    def create_product(self, **kwargs) -> Product:
        """Create an active product; opening stock is booked as an adjustment movement"""
        self._ensure_sku_free(kwargs['sku'])

        data = {key: kwargs[key] for key in UPDATABLE_FIELDS if kwargs.get(key) is not None}
        for key in MONEY_FIELDS:
            data[key] = to_decimal(data.get(key))
        data.setdefault('min_stock', current_app.config.get('DEFAULT_MIN_STOCK', 5))

        product = self.product_repo.add(Product(stock=0, **data))

        opening_stock = kwargs.get('stock') or 0
        if opening_stock > 0:
            self.ledger.adjust_stock(
                product.id,
                opening_stock,
                movement_type=StockMovementType.ADJUSTMENT,
                notes='Opening stock'
            )

        logger.info(f"Created product {product.sku} (id {product.id}) with stock {product.stock}")
        return product

    @transactional
    def update_product(self, product_id: int, **kwargs) -> Product:
        """Edit descriptive and pricing fields; past order snapshots are unaffected"""
        product = self.get_product(product_id)

        new_sku = kwargs.get('sku')
        if new_sku and new_sku != product.sku:
            self._ensure_sku_free(new_sku, exclude_id=product.id)

        for key in UPDATABLE_FIELDS:
            if key in kwargs and kwargs[key] is not None:
                value = to_decimal(kwargs[key]) if key in MONEY_FIELDS else kwargs[key]
                setattr(product, key, value)

        self.product_repo.add(product)
        return product

    @transactional
    def archive_product(self, product_id: int) -> Product:
        """Soft delete; frees the SKU for a new active product"""
        product = self.get_product(product_id)
        product.archive()
        self.product_repo.add(product)
        logger.info(f"Archived product {product.sku} (id {product.id})")
        return product
