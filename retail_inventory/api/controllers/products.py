"""
Products Controller - product intake and archiving
"""

from flask import request
from flask_restx import Namespace, Resource, fields
from marshmallow import ValidationError
import logging

from retail_inventory.api.middlewares.correlation_id import get_correlation_id
from retail_inventory.exceptions import InventoryError
from retail_inventory.services import ProductService
from retail_inventory.utils.error_handlers import validation_error_payload
from retail_inventory.utils.schemas import ProductRequestSchema

logger = logging.getLogger(__name__)

products_ns = Namespace('products', description='Product intake')

product_create_schema = ProductRequestSchema()
# Stock only changes through stock-in and orders
product_update_schema = ProductRequestSchema(partial=True, exclude=('stock',))

product_model = products_ns.model('ProductRequest', {
    'name': fields.String(required=True),
    'sku': fields.String(required=True),
    'category': fields.String,
    'size': fields.String,
    'color': fields.String,
    'hpp': fields.Float(min=0, description='Unit cost'),
    'selling_price': fields.Float(required=True, min=0),
    'stock': fields.Integer(min=0, description='Opening stock (create only)'),
    'min_stock': fields.Integer(min=0, description='Low-stock threshold'),
    'description': fields.String
})


@products_ns.route('/')
class ProductList(Resource):
    @products_ns.doc('create_product')
    @products_ns.expect(product_model)
    def post(self):
        """Create a product"""
        try:
            data = product_create_schema.load(request.get_json(silent=True) or {})
            product = ProductService().create_product(**data)
            return product.to_dict(), 201

        except ValidationError as e:
            return validation_error_payload(e), 400
        except InventoryError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.exception(f"[{get_correlation_id()}] Error creating product: {e}")
            return {'error': 'Internal server error'}, 500


@products_ns.route('/low-stock')
class ProductLowStock(Resource):
    @products_ns.doc('list_low_stock')
    def get(self):
        """List active products below their minimum stock"""
        try:
            products = ProductService().list_low_stock()
            return {
                'products': [product.to_dict() for product in products],
                'total': len(products)
            }, 200

        except Exception as e:
            logger.exception(f"[{get_correlation_id()}] Error listing low stock products: {e}")
            return {'error': 'Internal server error'}, 500


@products_ns.route('/<int:product_id>')
class ProductDetail(Resource):
    @products_ns.doc('get_product')
    def get(self, product_id):
        """Get an active product"""
        try:
            return ProductService().get_product(product_id).to_dict(), 200

        except InventoryError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.exception(f"[{get_correlation_id()}] Error getting product {product_id}: {e}")
            return {'error': 'Internal server error'}, 500

    @products_ns.doc('update_product')
    @products_ns.expect(product_model)
    def put(self, product_id):
        """Edit product details and prices"""
        try:
            data = product_update_schema.load(request.get_json(silent=True) or {})
            product = ProductService().update_product(product_id, **data)
            return product.to_dict(), 200

        except ValidationError as e:
            return validation_error_payload(e), 400
        except InventoryError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.exception(f"[{get_correlation_id()}] Error updating product {product_id}: {e}")
            return {'error': 'Internal server error'}, 500

    @products_ns.doc('archive_product')
    def delete(self, product_id):
        """Archive a product (soft delete)"""
        try:
            product = ProductService().archive_product(product_id)
            return product.to_dict(), 200

        except InventoryError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.exception(f"[{get_correlation_id()}] Error archiving product {product_id}: {e}")
            return {'error': 'Internal server error'}, 500
