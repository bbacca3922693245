"""
Product Repository Implementation
"""

from typing import List, Optional

from retail_inventory.database import db
from retail_inventory.models import Product, ProductStatus
from .base import ProductRepositoryInterface


class ProductRepository(ProductRepositoryInterface):
    """Concrete implementation of product repository"""

    def _query(self, include_archived: bool = False):
        query = Product.query
        if not include_archived:
            query = query.filter(Product.status == ProductStatus.ACTIVE)
        return query

    def get_by_id(self, product_id: int, include_archived: bool = False) -> Optional[Product]:
        """Get product by ID"""
        return self._query(include_archived).filter(Product.id == product_id).first()

    def lock_and_get(self, product_id: int, include_archived: bool = False) -> Optional[Product]:
        """
        SELECT ... FOR UPDATE on one product row.

        The lock is held until the enclosing transaction ends. populate_existing
        makes sure a row already in the session is refreshed from the locked read.
        """
        return (
            self._query(include_archived)
            .filter(Product.id == product_id)
            .with_for_update()
            .populate_existing()
            .first()
        )

    def lock_many(self, product_ids: List[int]) -> List[Product]:
        """Lock several product rows in ascending id order"""
        ids = sorted(set(product_ids))
        if not ids:
            return []
        return (
            Product.query
            .filter(Product.id.in_(ids))
            .order_by(Product.id.asc())
            .with_for_update()
            .populate_existing()
            .all()
        )

    def get_active_by_sku(self, sku: str) -> Optional[Product]:
        """Get the active product holding a SKU"""
        return self._query().filter(Product.sku == sku).first()

    def add(self, product: Product) -> Product:
        """Stage a new product and assign its id"""
        db.session.add(product)
        db.session.flush()
        return product

    def get_low_stock(self) -> List[Product]:
        """Active products below their minimum stock, lowest stock first"""
        return (
            self._query()
            .filter(Product.stock < Product.min_stock)
            .order_by(Product.stock.asc(), Product.id.asc())
            .all()
        )
