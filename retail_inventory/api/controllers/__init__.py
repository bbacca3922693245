"""
Controllers package initialization
"""

from flask import Blueprint
from flask_restx import Api

from retail_inventory.api.controllers.orders import orders_ns
from retail_inventory.api.controllers.stock import stock_ns
from retail_inventory.api.controllers.reports import reports_ns
from retail_inventory.api.controllers.products import products_ns
from retail_inventory.api.controllers.health import health_bp

api_bp = Blueprint('api', __name__)
api = Api(api_bp, version='1.0', title='Retail Inventory API',
          description='Orders, stock and financial reporting', doc='/docs/')

api.add_namespace(orders_ns)
api.add_namespace(stock_ns)
api.add_namespace(reports_ns)
api.add_namespace(products_ns)

__all__ = ['api_bp', 'api', 'health_bp']
