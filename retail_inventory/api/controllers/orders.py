"""
Orders Controller - order creation, lookup, status changes and deletion
"""

from flask import request
from flask_restx import Namespace, Resource, fields
from marshmallow import ValidationError
import logging

from retail_inventory.api.middlewares.correlation_id import get_correlation_id
from retail_inventory.exceptions import InventoryError
from retail_inventory.services import OrderService
from retail_inventory.utils.error_handlers import validation_error_payload
from retail_inventory.utils.schemas import (
    OrderCreateRequestSchema, OrderStatusRequestSchema, DateRangeQuerySchema
)

logger = logging.getLogger(__name__)

orders_ns = Namespace('orders', description='Order operations')

# Initialize schemas
order_create_schema = OrderCreateRequestSchema()
order_status_schema = OrderStatusRequestSchema()
date_range_schema = DateRangeQuerySchema()

order_item_model = orders_ns.model('OrderItemRequest', {
    'product_id': fields.Integer(required=True, description='Product ID'),
    'quantity': fields.Integer(required=True, min=1, description='Quantity ordered'),
    'size': fields.String(description='Size, used when the product has none'),
    'color': fields.String(description='Color, used when the product has none')
})

order_create_model = orders_ns.model('OrderCreateRequest', {
    'customer_name': fields.String(description='Customer name'),
    'customer_phone': fields.String(description='Customer phone'),
    'notes': fields.String(description='Order notes'),
    'items': fields.List(fields.Nested(order_item_model), required=True)
})

order_status_model = orders_ns.model('OrderStatusRequest', {
    'status': fields.String(required=True, enum=['pending', 'completed', 'cancelled'])
})


@orders_ns.route('/')
class OrderList(Resource):
    @orders_ns.doc('list_orders', params={
        'start': 'Earliest created_at (YYYY-MM-DD or ISO datetime)',
        'end': 'Latest created_at (YYYY-MM-DD covers the whole day)'
    })
    def get(self):
        """List orders newest first"""
        try:
            params = date_range_schema.load(request.args.to_dict())
            orders = OrderService().list_orders(**params)
            return {'orders': [order.to_dict() for order in orders], 'total': len(orders)}, 200

        except ValidationError as e:
            return validation_error_payload(e), 400
        except InventoryError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.exception(f"[{get_correlation_id()}] Error listing orders: {e}")
            return {'error': 'Internal server error'}, 500

    @orders_ns.doc('create_order')
    @orders_ns.expect(order_create_model)
    def post(self):
        """Create an order and take its items out of stock"""
        try:
            data = order_create_schema.load(request.get_json(silent=True) or {})
            order = OrderService().create_order(**data)
            return order.to_dict(), 201

        except ValidationError as e:
            return validation_error_payload(e), 400
        except InventoryError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.exception(f"[{get_correlation_id()}] Error creating order: {e}")
            return {'error': 'Internal server error'}, 500


@orders_ns.route('/<int:order_id>')
class OrderDetail(Resource):
    @orders_ns.doc('get_order')
    def get(self, order_id):
        """Get an order with its items"""
        try:
            order = OrderService().get_order(order_id)
            return order.to_dict(), 200

        except InventoryError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.exception(f"[{get_correlation_id()}] Error getting order {order_id}: {e}")
            return {'error': 'Internal server error'}, 500

    @orders_ns.doc('delete_order')
    def delete(self, order_id):
        """Delete an order; a pending order gives its stock back first"""
        try:
            OrderService().delete_order(order_id)
            return '', 204

        except InventoryError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.exception(f"[{get_correlation_id()}] Error deleting order {order_id}: {e}")
            return {'error': 'Internal server error'}, 500


@orders_ns.route('/<int:order_id>/status')
class OrderStatusUpdate(Resource):
    @orders_ns.doc('update_order_status')
    @orders_ns.expect(order_status_model)
    def put(self, order_id):
        """Move an order to completed or cancelled"""
        try:
            data = order_status_schema.load(request.get_json(silent=True) or {})
            order = OrderService().update_status(order_id, data['status'])
            return order.to_dict(), 200

        except ValidationError as e:
            return validation_error_payload(e), 400
        except InventoryError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.exception(f"[{get_correlation_id()}] Error updating order {order_id}: {e}")
            return {'error': 'Internal server error'}, 500
