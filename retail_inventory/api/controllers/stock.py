"""
Stock Controller - goods receipt and movement history
"""

from flask import request
from flask_restx import Namespace, Resource, fields
from marshmallow import ValidationError
import logging

from retail_inventory.api.middlewares.correlation_id import get_correlation_id
from retail_inventory.exceptions import InventoryError
from retail_inventory.services import InventoryLedger
from retail_inventory.utils.error_handlers import validation_error_payload
from retail_inventory.utils.schemas import StockInRequestSchema, StockMovementQuerySchema

logger = logging.getLogger(__name__)

stock_ns = Namespace('stock', description='Stock operations')

stock_in_schema = StockInRequestSchema()
movement_query_schema = StockMovementQuerySchema()

stock_in_model = stock_ns.model('StockInRequest', {
    'product_id': fields.Integer(required=True, description='Product ID'),
    'quantity': fields.Integer(required=True, min=1, description='Units received'),
    'unit_cost': fields.Float(required=True, min=0, description='Unit cost paid'),
    'supplier': fields.String(description='Supplier'),
    'notes': fields.String(description='Notes')
})


@stock_ns.route('/in')
class StockInResource(Resource):
    @stock_ns.doc('add_stock')
    @stock_ns.expect(stock_in_model)
    def post(self):
        """Receive goods: blend the unit cost and raise stock"""
        try:
            data = stock_in_schema.load(request.get_json(silent=True) or {})
            ledger = InventoryLedger()
            stock_in = ledger.add_stock(**data)
            product = ledger.product_repo.get_by_id(stock_in.product_id)

            return {
                'stock_in': stock_in.to_dict(),
                'product': product.to_dict() if product else None
            }, 201

        except ValidationError as e:
            return validation_error_payload(e), 400
        except InventoryError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.exception(f"[{get_correlation_id()}] Error receiving stock: {e}")
            return {'error': 'Internal server error'}, 500


@stock_ns.route('/movements')
class StockMovementList(Resource):
    @stock_ns.doc('list_stock_movements', params={
        'product_id': 'Only movements of this product',
        'start': 'Earliest created_at (YYYY-MM-DD or ISO datetime)',
        'end': 'Latest created_at (YYYY-MM-DD covers the whole day)'
    })
    def get(self):
        """Stock movement history newest first"""
        try:
            params = movement_query_schema.load(request.args.to_dict())
            movements = InventoryLedger().list_movements(**params)
            return {
                'movements': [movement.to_dict() for movement in movements],
                'total': len(movements)
            }, 200

        except ValidationError as e:
            return validation_error_payload(e), 400
        except Exception as e:
            logger.exception(f"[{get_correlation_id()}] Error listing stock movements: {e}")
            return {'error': 'Internal server error'}, 500
